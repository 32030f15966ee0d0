from typing import NewType

LeagueId = NewType("LeagueId", str)
UserId = NewType("UserId", str)
SlotId = NewType("SlotId", str)
