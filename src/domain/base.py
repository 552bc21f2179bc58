from sqlalchemy import BigInteger, Integer
from sqlmodel import SQLModel

# BIGINT on PostgreSQL; INTEGER on SQLite so the rowid autoincrements
IdType = BigInteger().with_variant(Integer(), "sqlite")


class BaseModel(SQLModel):
    pass
