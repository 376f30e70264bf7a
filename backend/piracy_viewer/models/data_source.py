from typing import Optional

from pydantic import BaseModel, ConfigDict


class DataSource(BaseModel):
    # The listing is hand-edited; keep whatever extra keys it carries
    model_config = ConfigDict(extra="allow")

    name: str
    url: str
    description: Optional[str] = None
    default: bool = False
