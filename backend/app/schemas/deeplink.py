from pydantic import BaseModel, Field
from typing import List, Optional


class DeepLinkRequest(BaseModel):
    url: str = Field(..., description="Full deep link, e.g. com.ham2k.polo://qso?...")


class LinkParamsModel(BaseModel):
    myRef: Optional[str] = Field(None, description="Our activation reference")
    mySig: Optional[str] = Field(None, description="Our activation program (sota, pota, ...)")
    theirRef: Optional[str] = Field(None, description="Their activation reference")
    theirSig: Optional[str] = Field(None, description="Their activation program")
    freq: Optional[int] = Field(None, description="Frequency in Hz")
    mode: Optional[str] = None
    time: Optional[int] = Field(None, description="Start time, epoch milliseconds")
    myCall: Optional[str] = None
    theirCall: Optional[str] = None


class PartyModel(BaseModel):
    call: Optional[str] = None


class QSORefModel(BaseModel):
    type: str = Field(..., description="Hunting ref type, e.g. pota")
    ref: str


class SuggestedQSOModel(BaseModel):
    suggestion_key: str = Field(..., description="deeplink-<epoch ms>, new for every suggestion")
    their: PartyModel = Field(default_factory=PartyModel)
    our: PartyModel = Field(default_factory=PartyModel)
    freq: Optional[int] = None
    band: Optional[str] = None
    mode: Optional[str] = None
    start_at_millis: Optional[int] = None
    refs: Optional[List[QSORefModel]] = None


class OperationModel(BaseModel):
    uuid: str
    title: str
    refs: List[QSORefModel] = Field(default_factory=list)


class DeepLinkOpenModel(BaseModel):
    operation: OperationModel
    qso: SuggestedQSOModel
