from pydantic import BaseModel


class LocationResponse(BaseModel):
    city: str = ""
    country: str = ""
