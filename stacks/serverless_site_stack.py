import os

from aws_cdk import (
    Stack,
    CfnOutput,
    Duration,
    Fn,
    aws_s3 as s3,
    aws_s3_deployment as s3deploy,
    aws_lambda as lambda_,
    aws_apigatewayv2 as apigwv2,
    aws_apigatewayv2_integrations as integrations,
)
from constructs import Construct

from config import EnvConfig
from stacks.hybrid_distribution import HybridDistribution, zone_resolver_for
from topology import TopologyAssembler, ZoneResolver
from topology.sites import S3_ORIGIN_ID, serverless_topology

SERVER_CODE_PATH = os.path.join(os.path.dirname(__file__), "..", "lambda", "server")


class ServerlessSiteStack(Stack):
    """
    Deploys the serverless web app:
    1. Private S3 bucket for the built client assets.
    2. Server Lambda behind an API Gateway HTTP API stage.
    3. One CloudFront distribution: asset paths to S3, everything else to the API.
    4. Route53 root and www aliases (production only).
    """
    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        config: EnvConfig,
        zone_resolver: ZoneResolver = None,
        **kwargs
    ) -> None:
        super().__init__(scope, construct_id, **kwargs)

        # =================================================================
        # 1. STATIC ASSETS BUCKET
        # =================================================================
        self.bucket = s3.Bucket(self, "Bucket",
            encryption=s3.BucketEncryption.S3_MANAGED,
            block_public_access=s3.BlockPublicAccess.BLOCK_ALL,
            enforce_ssl=True,
            removal_policy=config.removal_policy,
            auto_delete_objects=config.auto_delete_objects
        )

        # =================================================================
        # 2. SERVER FUNCTION
        # =================================================================
        # The default execution role carries AWSLambdaBasicExecutionRole.
        self.server_fn = lambda_.Function(self, "ServerFn",
            runtime=lambda_.Runtime.PYTHON_3_12,
            handler="main.lambda_handler",
            code=lambda_.Code.from_asset(SERVER_CODE_PATH),
            timeout=Duration.seconds(10),
            environment={
                "STAGE_NAME": config.name
            }
        )

        # =================================================================
        # 3. HTTP API (single $default route, one stage per environment)
        # =================================================================
        self.http_api = apigwv2.HttpApi(self, "HttpApiGateway",
            create_default_stage=False,
            default_integration=integrations.HttpLambdaIntegration(
                "LambdaIntegration", self.server_fn,
                payload_format_version=apigwv2.PayloadFormatVersion.VERSION_2_0
            )
        )

        self.stage = apigwv2.HttpStage(self, "ApiStage",
            http_api=self.http_api,
            stage_name=config.name,
            auto_deploy=True,
            throttle=apigwv2.ThrottleSettings(burst_limit=5000, rate_limit=10000)
        )

        # Hostname only: "https://abc.execute-api.region.amazonaws.com" -> index 2 after splitting on "/"
        api_domain = Fn.select(2, Fn.split("/", self.http_api.api_endpoint))

        # =================================================================
        # 4. CLOUDFRONT + DNS
        # =================================================================
        assembler = TopologyAssembler(
            config.serverless,
            zone_resolver or zone_resolver_for(self, config.hosted_zones)
        )
        self.topology = serverless_topology(
            assembler,
            bucket_domain_name=self.bucket.bucket_regional_domain_name,
            api_domain_name=api_domain,
            stage_name=self.stage.stage_name,
        )

        self.distribution = HybridDistribution(self, "Distribution",
            topology=self.topology,
            buckets={S3_ORIGIN_ID: self.bucket}
        )

        if config.client_assets_path:
            s3deploy.BucketDeployment(self, "SyncedFolder",
                destination_bucket=self.bucket,
                sources=[s3deploy.Source.asset(config.client_assets_path)]
            )

        # =================================================================
        # 5. OUTPUTS
        # =================================================================
        CfnOutput(self, "HttpApiEndpoint", value=f"{self.http_api.api_endpoint}/{self.stage.stage_name}")
        CfnOutput(self, "DistributionAddress", value=f"https://{self.distribution.domain_name}")
        CfnOutput(self, "BucketName", value=self.bucket.bucket_name)
