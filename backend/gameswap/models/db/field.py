from gameswap.models.db.shared import BaseModelORM


class FieldKey(BaseModelORM):
    park_code: str
    field_code: str

    @property
    def normalized(self) -> str:
        return f"{self.park_code}/{self.field_code}"


class FieldImportRow(BaseModelORM):
    field_key: str
    park_code: str
    field_code: str
    park_name: str = ""
    field_name: str = ""
    display_name: str = ""
    address: str = ""
    notes: str = ""
    is_active: bool = True
