from sqlalchemy import BigInteger, Integer
from sqlalchemy.orm import declarative_base

Base = declarative_base()

# SQLite only autoincrements INTEGER primary keys.
IdType = BigInteger().with_variant(Integer(), "sqlite")
