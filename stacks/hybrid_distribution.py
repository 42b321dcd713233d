from typing import Dict, Mapping

from aws_cdk import (
    Names,
    Stack,
    aws_cloudfront as cloudfront,
    aws_iam as iam,
    aws_route53 as route53,
    aws_s3 as s3,
)
from constructs import Construct

from topology import (
    CLOUDFRONT_HOSTED_ZONE_ID,
    CachePolicy,
    CertificateSource,
    DistributionTopology,
    Origin,
    OriginBinding,
    OriginKind,
    OriginRequestPolicy,
    StaticZoneResolver,
    ZoneReference,
    ZoneResolver,
    bind_endpoint,
)
from topology.domain import canonical

# CloudFront managed policy ids
CACHE_POLICY_IDS = {
    CachePolicy.DISABLED: "4135ea2d-6df8-44a3-9df3-4b5a84be39ad",
    CachePolicy.OPTIMIZED: "658327ea-f89d-4fab-a63d-7e88639e58f6",
}
ORIGIN_REQUEST_POLICY_IDS = {
    OriginRequestPolicy.ALL_VIEWER_EXCEPT_HOST_HEADER: "b689b0a8-53d0-40ab-baf2-68738e2966ac",
}

VIEWER_PROTOCOL_POLICY = "redirect-to-https"


class HostedZoneLookupResolver(ZoneResolver):
    """
    Resolves zones through the CDK context provider (Route53 lookup at synth).
    The owning stack MUST have an explicit account and region.
    """

    def __init__(self, scope: Construct) -> None:
        self.scope = scope
        self._lookups = 0

    def resolve_zone(self, parent_zone: str) -> ZoneReference:
        self._lookups += 1
        hosted_zone = route53.HostedZone.from_lookup(
            self.scope, f"HostedZone{self._lookups}",
            domain_name=parent_zone.rstrip(".")
        )
        return ZoneReference(zone_id=hosted_zone.hosted_zone_id, zone_name=canonical(parent_zone))


def zone_resolver_for(scope: Construct, hosted_zones: Mapping[str, str]) -> ZoneResolver:
    # Explicitly configured zone ids win over a synth-time lookup.
    if hosted_zones:
        return StaticZoneResolver(hosted_zones)
    return HostedZoneLookupResolver(scope)


def _origin_property(origin: Origin, oac_id: str) -> cloudfront.CfnDistribution.OriginProperty:
    if origin.kind is OriginKind.OBJECT_STORAGE:
        return cloudfront.CfnDistribution.OriginProperty(
            id=origin.origin_id,
            domain_name=origin.domain_name,
            origin_path=origin.origin_path,
            origin_access_control_id=oac_id,
            # Access goes through OAC; the legacy OAI must stay empty.
            s3_origin_config=cloudfront.CfnDistribution.S3OriginConfigProperty(origin_access_identity=""),
        )
    return cloudfront.CfnDistribution.OriginProperty(
        id=origin.origin_id,
        domain_name=origin.domain_name,
        origin_path=origin.origin_path,
        custom_origin_config=cloudfront.CfnDistribution.CustomOriginConfigProperty(
            origin_protocol_policy=origin.protocol.value,
            http_port=80,
            https_port=443,
            origin_ssl_protocols=["TLSv1.2"],
        ),
    )


def _behavior_fields(binding: OriginBinding) -> Dict:
    request_policy = binding.origin_request_policy
    return dict(
        target_origin_id=binding.origin_id,
        viewer_protocol_policy=VIEWER_PROTOCOL_POLICY,
        allowed_methods=[m.value for m in binding.allowed_methods],
        cached_methods=[m.value for m in binding.cached_methods],
        compress=binding.compress,
        cache_policy_id=CACHE_POLICY_IDS[binding.cache_policy],
        origin_request_policy_id=ORIGIN_REQUEST_POLICY_IDS[request_policy] if request_policy else None,
    )


def _viewer_certificate(topology: DistributionTopology) -> cloudfront.CfnDistribution.ViewerCertificateProperty:
    if topology.policy.certificate_source is CertificateSource.ACM:
        # Per AWS, the ACM certificate must live in us-east-1.
        return cloudfront.CfnDistribution.ViewerCertificateProperty(
            acm_certificate_arn=topology.certificate_arn,
            ssl_support_method="sni-only",
        )
    return cloudfront.CfnDistribution.ViewerCertificateProperty(cloud_front_default_certificate=True)


class HybridDistribution(Construct):
    """
    Declares a resolved DistributionTopology:
    1. An Origin Access Control and the CloudFront distribution (ordered behaviors).
    2. Bucket policies letting only this distribution read the S3 origins.
    3. Route53 alias records, once the distribution's domain name is known.
    """

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        topology: DistributionTopology,
        buckets: Mapping[str, s3.IBucket],
        **kwargs
    ) -> None:
        super().__init__(scope, construct_id, **kwargs)
        self.topology = topology
        stack = Stack.of(self)

        # =================================================================
        # 1. ORIGIN ACCESS CONTROL
        # =================================================================
        self.origin_access_control = cloudfront.CfnOriginAccessControl(self, "OAC",
            origin_access_control_config=cloudfront.CfnOriginAccessControl.OriginAccessControlConfigProperty(
                name=Names.unique_resource_name(self, max_length=64),
                origin_access_control_origin_type="s3",
                signing_behavior="always",  # always override authorization header
                signing_protocol="sigv4"    # only allowed value
            )
        )

        # =================================================================
        # 2. DISTRIBUTION
        # =================================================================
        ordered = [
            cloudfront.CfnDistribution.CacheBehaviorProperty(
                path_pattern=binding.path_pattern, **_behavior_fields(binding)
            )
            for binding in topology.ordered_behaviors
        ]

        self.distribution = cloudfront.CfnDistribution(self, "Distribution",
            distribution_config=cloudfront.CfnDistribution.DistributionConfigProperty(
                enabled=True,
                aliases=list(topology.aliases) if topology.aliases else None,
                http_version="http2",
                default_root_object=topology.default_root_object,
                origins=[
                    _origin_property(origin, self.origin_access_control.attr_id)
                    for origin in topology.origins
                ],
                default_cache_behavior=cloudfront.CfnDistribution.DefaultCacheBehaviorProperty(
                    **_behavior_fields(topology.default_behavior)
                ),
                cache_behaviors=ordered or None,
                restrictions=cloudfront.CfnDistribution.RestrictionsProperty(
                    geo_restriction=cloudfront.CfnDistribution.GeoRestrictionProperty(restriction_type="none")
                ),
                viewer_certificate=_viewer_certificate(topology),
            )
        )

        self.distribution_arn = f"arn:aws:cloudfront::{stack.account}:distribution/{self.distribution.ref}"

        # =================================================================
        # 3. BUCKET ACCESS (CloudFront service principal only)
        # =================================================================
        for origin in topology.origins:
            if origin.kind is not OriginKind.OBJECT_STORAGE:
                continue
            bucket = buckets[origin.origin_id]
            bucket.add_to_resource_policy(iam.PolicyStatement(
                sid="AllowCloudFrontServicePrincipalRead",
                effect=iam.Effect.ALLOW,
                principals=[iam.ServicePrincipal("cloudfront.amazonaws.com")],
                actions=["s3:GetObject"],
                resources=[bucket.arn_for_objects("*")],
                conditions={
                    "StringEquals": {
                        "AWS:SourceArn": self.distribution_arn
                    }
                }
            ))

        # =================================================================
        # 4. DNS ALIASES (Route53)
        # =================================================================
        # The alias target is this distribution, so the records can only be
        # declared after its domain name has been bound.
        self.endpoint = bind_endpoint(
            topology, self.distribution.attr_domain_name, CLOUDFRONT_HOSTED_ZONE_ID
        )

        self.records = []
        if topology.alias_records:
            for record_id, record in zip(("AliasRecord", "WwwAliasRecord"), topology.alias_records):
                target = record.target.get()
                self.records.append(route53.CfnRecordSet(self, record_id,
                    hosted_zone_id=record.zone.zone_id,
                    name=record.fqdn,
                    type=record.record_type,
                    alias_target=route53.CfnRecordSet.AliasTargetProperty(
                        dns_name=target.domain_name,
                        hosted_zone_id=target.routing_zone_id,
                        evaluate_target_health=record.evaluate_target_health
                    )
                ))

    @property
    def domain_name(self) -> str:
        return self.distribution.attr_domain_name
