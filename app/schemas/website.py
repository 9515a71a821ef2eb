from pydantic import BaseModel


class CollegeName(BaseModel):
    name: str
