import logging
from typing import Annotated

from fastapi import APIRouter, HTTPException, Query

from trailerflow.schemas import ProxyConfigUpdate, StreamRequest
from trailerflow.utils.proxy_utils import (
    decode_m3u8_proxy_url,
    get_m3u8_proxy_url,
    set_m3u8_proxy_url,
    update_m3u8_proxy_url,
)
from trailerflow.utils.stream_proxy import requires_proxy, setup_proxy

proxy_router = APIRouter()
logger = logging.getLogger(__name__)


@proxy_router.post("/stream", summary="Route a stream through the M3U8 proxy when needed")
async def proxy_stream(request: StreamRequest):
    stream = request.stream
    proxied = requires_proxy(stream)
    if proxied:
        setup_proxy(stream)
    return {"proxied": proxied, "stream": stream.model_dump(by_alias=True)}


@proxy_router.get("/rewrite", summary="Point a legacy proxy URL at the configured proxy")
async def rewrite_proxy_url(url: Annotated[str, Query(min_length=1)]):
    return {"url": update_m3u8_proxy_url(url)}


@proxy_router.get("/decode", summary="Show the destination and headers of a proxy URL")
async def decode_proxy_url(url: Annotated[str, Query(min_length=1)]):
    target = decode_m3u8_proxy_url(url)
    if target is None:
        raise HTTPException(status_code=400, detail="Not a proxy URL")
    return target


@proxy_router.get("/config", summary="Get the configured M3U8 proxy URL")
async def get_proxy_config():
    return {"m3u8_proxy_url": get_m3u8_proxy_url()}


@proxy_router.post("/config", summary="Change the M3U8 proxy URL")
async def update_proxy_config(update: ProxyConfigUpdate):
    set_m3u8_proxy_url(update.m3u8_proxy_url)
    return {"m3u8_proxy_url": get_m3u8_proxy_url()}
