"""Regions API Gateway is offered in, from botocore's bundled endpoint data."""

from __future__ import annotations

import boto3


def get_regions(session: boto3.Session | None = None) -> list[str]:
    """Every region with an API Gateway endpoint, across all partitions (aws, aws-cn, aws-us-gov, ...)."""
    session = session or boto3.Session()
    regions: list[str] = []
    for partition in session.get_available_partitions():
        regions.extend(session.get_available_regions("apigateway", partition_name=partition))
    return regions
