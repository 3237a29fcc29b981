from enum import Enum
from typing import Annotated, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class StreamFlag(str, Enum):
    CORS_ALLOWED = "cors-allowed"
    IP_LOCKED = "ip-locked"


class FeatureMap(BaseModel):
    """Capabilities of a playback target."""

    requires: List[StreamFlag] = Field(default_factory=list)
    disallowed: List[StreamFlag] = Field(default_factory=list)


class Caption(BaseModel):
    id: str
    url: str
    type: Literal["srt", "vtt"] = "vtt"
    language: Optional[str] = None
    has_cors_restrictions: bool = Field(False, alias="hasCorsRestrictions")

    model_config = ConfigDict(populate_by_name=True)


class BaseStream(BaseModel):
    id: str = ""
    flags: List[StreamFlag] = Field(default_factory=list)
    headers: Dict[str, str] = Field(default_factory=dict)
    captions: List[Caption] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True)


class HlsStream(BaseStream):
    type: Literal["hls"] = "hls"
    playlist: str = Field(..., description="URL of the HLS manifest.")
    proxy_depth: Optional[Literal[0, 1, 2]] = Field(
        None, alias="proxyDepth", description="How many nested playlist levels the proxy should rewrite."
    )


class StreamFile(BaseModel):
    type: Literal["mp4"] = "mp4"
    url: str


class FileStream(BaseStream):
    type: Literal["file"] = "file"
    qualities: Dict[str, StreamFile] = Field(default_factory=dict, description="Quality label to file mapping.")


Stream = Annotated[Union[HlsStream, FileStream], Field(discriminator="type")]


class ProxyTarget(BaseModel):
    """The destination and headers carried by a proxy URL."""

    url: str
    headers: Dict[str, str] = Field(default_factory=dict)


class ProxyOptions(BaseModel):
    depth: Optional[Literal[0, 1, 2]] = None


class ProxyPayload(BaseModel):
    type: Optional[Literal["hls", "mp4"]] = None
    url: Optional[str] = None
    headers: Optional[Dict[str, str]] = None
    options: ProxyOptions = Field(default_factory=ProxyOptions)


class VideoEncoding(BaseModel):
    definition: Optional[str] = None
    video_url: Optional[str] = Field(None, alias="videoUrl")

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class GenerateUrlRequest(BaseModel):
    destination_url: str = Field(..., description="The URL to route through the M3U8 proxy.")
    request_headers: Dict[str, str] = Field(
        default_factory=dict, description="Headers the proxy must send to the destination."
    )
    features: Optional[FeatureMap] = Field(None, description="Capabilities of the playback target.")


class ProxyConfigUpdate(BaseModel):
    m3u8_proxy_url: str = Field(..., min_length=1, description="New base URL of the M3U8 proxy.")


class StreamRequest(BaseModel):
    stream: Stream
