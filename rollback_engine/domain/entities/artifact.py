from pydantic import BaseModel


class Artifact(BaseModel):
    version: str
    environment: str
    location: str
