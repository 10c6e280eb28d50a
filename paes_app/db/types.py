# paes_app/db/types.py
from sqlalchemy import BigInteger, Integer

# sqlite는 INTEGER PRIMARY KEY 에서만 자동 증가가 된다
BigIntId = BigInteger().with_variant(Integer, "sqlite")
