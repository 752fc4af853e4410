#!/usr/bin/env python3
"""
warehouse Configuration Management

Single YAML file, two sections:
- top level: HTTP server (host, port, log_level)
- iotdb:     history storage backend (disabled unless `enabled: true`)

Example:
    log_level: INFO
    iotdb:
      enabled: true
      host: 127.0.0.1
      rpc_port: 6667
      version: "1.0"
      expire_time: "7776000000"   # ms, "-1" never expires
"""

import logging
from typing import List, Optional

import yaml
from pydantic import BaseModel, Field

from ..store.identifiers import IoTDBVersion

logger = logging.getLogger("warehouse.config")


class IoTDBConfig(BaseModel):
    enabled: bool = False
    host: str = "127.0.0.1"
    rpc_port: int = 6667
    username: Optional[str] = "root"
    password: Optional[str] = "root"
    node_urls: List[str] = Field(default_factory=list)   # cluster nodes, "host:port"
    zone_id: Optional[str] = None
    version: IoTDBVersion = IoTDBVersion.V_1_0
    query_timeout_in_ms: int = 0                          # 0 means no timeout
    expire_time: Optional[str] = None                     # TTL in ms, "-1" removes it
    namespace_root: str = "root.warehouse"
    max_pool_size: int = 5
    wait_timeout_in_ms: int = 3000
    fetch_size: int = 1024


class WarehouseConfig(BaseModel):
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"
    iotdb: IoTDBConfig = Field(default_factory=IoTDBConfig)


def load_config_from(path: str) -> WarehouseConfig:
    """Load warehouse configuration from YAML file."""
    with open(path, "r") as f:
        data = yaml.safe_load(f) or {}
    config = WarehouseConfig(**data)
    logger.info(f"Loaded configuration from {path} (iotdb enabled: {config.iotdb.enabled})")
    return config
