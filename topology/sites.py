"""
The two hybrid layouts this repo deploys.

Serverless site: static asset paths go to S3, everything else to the
API Gateway stage in front of the server Lambda.

Container site: ``/api/*`` goes to the load balancer, everything else to
the S3 static export.
"""
from typing import Sequence

from topology.assembler import DistributionTopology, TopologyAssembler
from topology.policy import CachePolicy, OriginRequestPolicy
from topology.routing import (
    ALL_METHODS,
    GET_HEAD,
    GET_HEAD_OPTIONS,
    Origin,
    OriginBinding,
    OriginKind,
    OriginProtocol,
)

S3_ORIGIN_ID = "S3Origin"
API_GATEWAY_ORIGIN_ID = "APIGatewayOrigin"
ALB_ORIGIN_ID = "ALBOrigin"

STATIC_ASSET_PATTERNS = ("/favicon.ico", "/assets/*", "/images/*")


def static_asset_binding(path_pattern: str) -> OriginBinding:
    return OriginBinding(
        origin_id=S3_ORIGIN_ID,
        path_pattern=path_pattern,
        allowed_methods=GET_HEAD,
        cached_methods=GET_HEAD,
        compress=True,
    )


def serverless_topology(
    assembler: TopologyAssembler,
    bucket_domain_name: str,
    api_domain_name: str,
    stage_name: str,
    static_patterns: Sequence[str] = STATIC_ASSET_PATTERNS,
) -> DistributionTopology:
    origins = [
        Origin(S3_ORIGIN_ID, bucket_domain_name, kind=OriginKind.OBJECT_STORAGE),
        Origin(
            API_GATEWAY_ORIGIN_ID, api_domain_name,
            origin_path=f"/{stage_name}",
            protocol=OriginProtocol.HTTPS_ONLY,
        ),
    ]
    default = OriginBinding(
        origin_id=API_GATEWAY_ORIGIN_ID,
        allowed_methods=ALL_METHODS,
        cached_methods=GET_HEAD_OPTIONS,
        compress=False,
        cache_policy=CachePolicy.DISABLED,
        origin_request_policy=OriginRequestPolicy.ALL_VIEWER_EXCEPT_HOST_HEADER,
    )
    return assembler.assemble(
        origins,
        [static_asset_binding(p) for p in static_patterns],
        default,
        name="serverless distribution",
    )


def container_topology(
    assembler: TopologyAssembler,
    bucket_domain_name: str,
    load_balancer_dns_name: str,
) -> DistributionTopology:
    origins = [
        Origin(S3_ORIGIN_ID, bucket_domain_name, kind=OriginKind.OBJECT_STORAGE),
        Origin(ALB_ORIGIN_ID, load_balancer_dns_name, protocol=OriginProtocol.HTTP_ONLY),
    ]
    api = OriginBinding(
        origin_id=ALB_ORIGIN_ID,
        path_pattern="/api/*",
        allowed_methods=ALL_METHODS,
        cached_methods=GET_HEAD_OPTIONS,
        compress=True,
        cache_policy=CachePolicy.DISABLED,
        origin_request_policy=OriginRequestPolicy.ALL_VIEWER_EXCEPT_HOST_HEADER,
    )
    default = OriginBinding(
        origin_id=S3_ORIGIN_ID,
        allowed_methods=GET_HEAD_OPTIONS,
        cached_methods=GET_HEAD_OPTIONS,
        compress=True,
    )
    return assembler.assemble(
        origins, [api], default,
        default_root_object="index.html",
        name="container distribution",
    )
