from pydantic import BaseModel, ConfigDict


class ORMModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class Record(ORMModel):
    """Every stored entity carries a numeric id unique within its collection."""

    id: int
