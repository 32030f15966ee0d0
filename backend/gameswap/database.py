from databases import Database

from gameswap.config import config

database = Database(config.pg_dsn)
