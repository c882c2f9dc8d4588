from pydantic import BaseModel


class DeletionResponse(BaseModel):
    ok: bool = True
