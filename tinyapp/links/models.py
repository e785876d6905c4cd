from pydantic import BaseModel, ConfigDict
from typing import List
from datetime import datetime


class VisitRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    visitor_id: str
    timestamp: datetime


class LinkRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    short_code: str
    long_url: str
    owner_id: str
    created_at: datetime
    visit_count: int
    unique_visitor_count: int


class LinkDetail(LinkRead):
    visits: List[VisitRead] = []
