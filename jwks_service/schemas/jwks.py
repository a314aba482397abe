from pydantic import BaseModel
from typing import List

class PublicJWK(BaseModel):
    kty: str
    kid: str
    alg: str
    use: str
    n: str
    e: str

class JWKSet(BaseModel):
    keys: List[PublicJWK]

class ErrorDetail(BaseModel):
    code: str
    message: str

class ErrorResponse(BaseModel):
    success: bool = False
    error: ErrorDetail
