import aws_cdk as core
import aws_cdk.assertions as assertions
from aws_cdk.assertions import Match

from stacks.hybrid_distribution import CACHE_POLICY_IDS, ORIGIN_REQUEST_POLICY_IDS
from stacks.serverless_site_stack import ServerlessSiteStack
from topology import CLOUDFRONT_HOSTED_ZONE_ID, CachePolicy, OriginRequestPolicy

DISABLED = CACHE_POLICY_IDS[CachePolicy.DISABLED]
OPTIMIZED = CACHE_POLICY_IDS[CachePolicy.OPTIMIZED]


def synth(config):
    app = core.App()
    stack = ServerlessSiteStack(app, "serverless-site", config=config)
    return stack, assertions.Template.from_stack(stack)


def static_behavior(pattern, cache_policy_id):
    return Match.object_like({
        "PathPattern": pattern,
        "TargetOriginId": "S3Origin",
        "AllowedMethods": ["GET", "HEAD"],
        "CachedMethods": ["GET", "HEAD"],
        "Compress": True,
        "CachePolicyId": cache_policy_id,
        "ViewerProtocolPolicy": "redirect-to-https",
    })


def test_dev_distribution(dev_config):
    _, template = synth(dev_config)

    template.resource_count_is("AWS::CloudFront::Distribution", 1)
    template.has_resource_properties("AWS::CloudFront::Distribution", {
        "DistributionConfig": Match.object_like({
            "Enabled": True,
            "HttpVersion": "http2",
            "Aliases": Match.absent(),
            "ViewerCertificate": {"CloudFrontDefaultCertificate": True},
            "CacheBehaviors": [
                static_behavior("/favicon.ico", DISABLED),
                static_behavior("/assets/*", DISABLED),
                static_behavior("/images/*", DISABLED),
            ],
            "DefaultCacheBehavior": Match.object_like({
                "TargetOriginId": "APIGatewayOrigin",
                "AllowedMethods": ["DELETE", "GET", "HEAD", "OPTIONS", "PATCH", "POST", "PUT"],
                "CachedMethods": ["GET", "HEAD", "OPTIONS"],
                "Compress": False,
                "CachePolicyId": DISABLED,
                "OriginRequestPolicyId": ORIGIN_REQUEST_POLICY_IDS[OriginRequestPolicy.ALL_VIEWER_EXCEPT_HOST_HEADER],
            }),
            "Origins": [
                Match.object_like({"Id": "S3Origin", "OriginAccessControlId": Match.any_value()}),
                Match.object_like({
                    "Id": "APIGatewayOrigin",
                    "OriginPath": "/dev",
                    "CustomOriginConfig": Match.object_like({
                        "OriginProtocolPolicy": "https-only",
                        "OriginSSLProtocols": ["TLSv1.2"],
                    }),
                }),
            ],
        })
    })
    template.resource_count_is("AWS::Route53::RecordSet", 0)


def test_http_api_stage(dev_config):
    _, template = synth(dev_config)

    template.has_resource_properties("AWS::ApiGatewayV2::Api", {"ProtocolType": "HTTP"})
    template.has_resource_properties("AWS::ApiGatewayV2::Route", {"RouteKey": "$default"})
    template.has_resource_properties("AWS::ApiGatewayV2::Integration", {
        "IntegrationType": "AWS_PROXY",
        "PayloadFormatVersion": "2.0",
    })
    template.has_resource_properties("AWS::ApiGatewayV2::Stage", {
        "StageName": "dev",
        "AutoDeploy": True,
        "DefaultRouteSettings": Match.object_like({
            "ThrottlingBurstLimit": 5000,
            "ThrottlingRateLimit": 10000,
        }),
    })
    template.has_resource_properties("AWS::Lambda::Function", {"Handler": "main.lambda_handler"})


def test_bucket_only_readable_by_distribution(dev_config):
    _, template = synth(dev_config)

    template.has_resource_properties("AWS::S3::BucketPolicy", {
        "PolicyDocument": {
            "Statement": Match.array_with([
                Match.object_like({
                    "Sid": "AllowCloudFrontServicePrincipalRead",
                    "Action": "s3:GetObject",
                    "Principal": {"Service": "cloudfront.amazonaws.com"},
                    "Condition": {"StringEquals": {"AWS:SourceArn": Match.any_value()}},
                })
            ])
        }
    })
    template.has_resource_properties("AWS::CloudFront::OriginAccessControl", {
        "OriginAccessControlConfig": Match.object_like({
            "OriginAccessControlOriginType": "s3",
            "SigningBehavior": "always",
            "SigningProtocol": "sigv4",
        })
    })


def test_prod_distribution_and_aliases(prod_config):
    stack, template = synth(prod_config)

    template.has_resource_properties("AWS::CloudFront::Distribution", {
        "DistributionConfig": Match.object_like({
            "Aliases": ["app.example.com", "www.app.example.com"],
            "ViewerCertificate": {
                "AcmCertificateArn": prod_config.serverless.certificate_arn,
                "SslSupportMethod": "sni-only",
            },
            "CacheBehaviors": [
                static_behavior("/favicon.ico", OPTIMIZED),
                static_behavior("/assets/*", OPTIMIZED),
                static_behavior("/images/*", OPTIMIZED),
            ],
        })
    })

    template.resource_count_is("AWS::Route53::RecordSet", 2)
    for name in ("app.example.com", "www.app.example.com"):
        template.has_resource_properties("AWS::Route53::RecordSet", {
            "Name": name,
            "Type": "A",
            "HostedZoneId": "Z0EXAMPLE",
            "AliasTarget": {
                "DNSName": {"Fn::GetAtt": [Match.any_value(), "DomainName"]},
                "HostedZoneId": CLOUDFRONT_HOSTED_ZONE_ID,
                "EvaluateTargetHealth": True,
            },
        })

    assert stack.topology.endpoint.resolved


def test_prod_without_configured_zones_uses_route53_lookup(prod_config):
    from dataclasses import replace

    config = replace(prod_config, hosted_zones={})
    app = core.App()
    stack = ServerlessSiteStack(
        app, "serverless-site-lookup",
        config=config,
        env=core.Environment(account="123456789012", region="us-east-1")
    )
    template = assertions.Template.from_stack(stack)

    # Until `cdk synth` performs the lookup the provider returns a placeholder zone.
    template.resource_count_is("AWS::Route53::RecordSet", 2)
    template.has_resource_properties("AWS::Route53::RecordSet", {
        "Name": "www.app.example.com",
        "HostedZoneId": "DUMMY",
    })
