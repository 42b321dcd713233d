from aws_cdk import (
    Stack,
    CfnOutput,
    Duration,
    RemovalPolicy,
    aws_s3 as s3,
    aws_s3_deployment as s3deploy,
    aws_ec2 as ec2,
    aws_ecs as ecs,
    aws_autoscaling as autoscaling,
    aws_elasticloadbalancingv2 as elbv2,
    aws_logs as logs,
    aws_ssm as ssm,
)
from constructs import Construct

from config import EnvConfig
from stacks.hybrid_distribution import HybridDistribution, zone_resolver_for
from topology import TopologyAssembler, ZoneResolver
from topology.sites import S3_ORIGIN_ID, container_topology

APP_PORT = 8000
CONTAINER_NAME = "app"

# Container environment variable -> SSM parameter name (under config.ssm_prefix)
SECRET_PARAMETERS = {
    "CLAUDE_API_KEY": "claude-api-key",
    "API_ACCESS_TOKEN": "api-access-token",
}


class ContainerSiteStack(Stack):
    """
    Deploys the container-based web app:
    1. Private S3 bucket for the static export.
    2. VPC with two public subnets, an ECS cluster on an EC2 capacity provider.
    3. The app service behind an Application Load Balancer.
    4. One CloudFront distribution: /api/* to the ALB, everything else to S3.
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
        # 1. STATIC EXPORT BUCKET
        # =================================================================
        self.bucket = s3.Bucket(self, "NextStatic",
            encryption=s3.BucketEncryption.S3_MANAGED,
            block_public_access=s3.BlockPublicAccess.BLOCK_ALL,
            enforce_ssl=True,
            removal_policy=config.removal_policy,
            auto_delete_objects=config.auto_delete_objects
        )

        # =================================================================
        # 2. NETWORK
        # =================================================================
        self.vpc = ec2.Vpc(self, "Vpc",
            ip_addresses=ec2.IpAddresses.cidr("10.242.0.0/16"),
            max_azs=2,
            nat_gateways=0,
            subnet_configuration=[
                ec2.SubnetConfiguration(name="public", subnet_type=ec2.SubnetType.PUBLIC, cidr_mask=24)
            ]
        )

        alb_sg = ec2.SecurityGroup(self, "AlbSg", vpc=self.vpc, allow_all_outbound=True)
        alb_sg.add_ingress_rule(ec2.Peer.any_ipv4(), ec2.Port.tcp(80))
        alb_sg.add_ingress_rule(ec2.Peer.any_ipv4(), ec2.Port.tcp(443))

        # Instances only accept app traffic coming through the load balancer
        instance_sg = ec2.SecurityGroup(self, "InstanceSg", vpc=self.vpc, allow_all_outbound=True)
        instance_sg.add_ingress_rule(alb_sg, ec2.Port.tcp(APP_PORT))

        # =================================================================
        # 3. ECS CLUSTER ON EC2
        # =================================================================
        self.cluster = ecs.Cluster(self, "Cluster", vpc=self.vpc)

        asg = autoscaling.AutoScalingGroup(self, "Asg",
            vpc=self.vpc,
            vpc_subnets=ec2.SubnetSelection(subnet_type=ec2.SubnetType.PUBLIC),
            associate_public_ip_address=True,
            instance_type=ec2.InstanceType("t2.micro"),
            machine_image=ecs.EcsOptimizedImage.amazon_linux2(),
            security_group=instance_sg,
            min_capacity=1,
            max_capacity=1,
            desired_capacity=1
        )

        capacity_provider = ecs.AsgCapacityProvider(self, "CapacityProvider",
            auto_scaling_group=asg,
            enable_managed_termination_protection=False,
            enable_managed_scaling=True,
            target_capacity_percent=100
        )
        self.cluster.add_asg_capacity_provider(capacity_provider)

        # =================================================================
        # 4. TASK DEFINITION & SERVICE
        # =================================================================
        log_group = logs.LogGroup(self, "AppLogGroup",
            log_group_name="/ecs/app-task",
            retention=logs.RetentionDays.ONE_MONTH,
            removal_policy=RemovalPolicy.DESTROY
        )

        task_definition = ecs.Ec2TaskDefinition(self, "AppTask",
            family="app-task",
            network_mode=ecs.NetworkMode.HOST
        )

        # Parameter store values are opaque to this stack; ECS injects them at start.
        secrets = {
            env_var: ecs.Secret.from_ssm_parameter(
                ssm.StringParameter.from_secure_string_parameter_attributes(
                    self, f"Param{name.title().replace('-', '')}",
                    parameter_name=f"{config.ssm_prefix}/{name}"
                )
            )
            for env_var, name in SECRET_PARAMETERS.items()
        }

        task_definition.add_container(CONTAINER_NAME,
            image=ecs.ContainerImage.from_registry(config.container_image),
            memory_limit_mib=512,
            port_mappings=[ecs.PortMapping(container_port=APP_PORT, host_port=APP_PORT)],
            secrets=secrets,
            logging=ecs.LogDrivers.aws_logs(stream_prefix="ecs", log_group=log_group)
        )

        self.service = ecs.Ec2Service(self, "AppService",
            cluster=self.cluster,
            task_definition=task_definition,
            desired_count=1,
            capacity_provider_strategies=[
                ecs.CapacityProviderStrategy(
                    capacity_provider=capacity_provider.capacity_provider_name,
                    weight=1
                )
            ]
        )

        # =================================================================
        # 5. APPLICATION LOAD BALANCER
        # =================================================================
        self.alb = elbv2.ApplicationLoadBalancer(self, "AppLb",
            vpc=self.vpc,
            internet_facing=True,
            security_group=alb_sg,
            vpc_subnets=ec2.SubnetSelection(subnet_type=ec2.SubnetType.PUBLIC)
        )

        listener = self.alb.add_listener("AppListener", port=80, open=False)
        listener.add_targets("AppTargets",
            port=APP_PORT,
            protocol=elbv2.ApplicationProtocol.HTTP,
            targets=[self.service.load_balancer_target(
                container_name=CONTAINER_NAME, container_port=APP_PORT
            )],
            health_check=elbv2.HealthCheck(
                enabled=True,
                path="/api/health",
                port=str(APP_PORT),
                protocol=elbv2.Protocol.HTTP,
                healthy_threshold_count=3,
                unhealthy_threshold_count=3,
                timeout=Duration.seconds(5),
                interval=Duration.seconds(30),
                healthy_http_codes="200"
            )
        )

        # =================================================================
        # 6. CLOUDFRONT + DNS
        # =================================================================
        assembler = TopologyAssembler(
            config.container,
            zone_resolver or zone_resolver_for(self, config.hosted_zones)
        )
        self.topology = container_topology(
            assembler,
            bucket_domain_name=self.bucket.bucket_regional_domain_name,
            load_balancer_dns_name=self.alb.load_balancer_dns_name,
        )

        self.distribution = HybridDistribution(self, "Distribution",
            topology=self.topology,
            buckets={S3_ORIGIN_ID: self.bucket}
        )

        if config.static_export_path:
            s3deploy.BucketDeployment(self, "SyncedFolder",
                destination_bucket=self.bucket,
                sources=[s3deploy.Source.asset(config.static_export_path)]
            )

        # =================================================================
        # 7. OUTPUTS
        # =================================================================
        CfnOutput(self, "BucketName", value=self.bucket.bucket_name)
        CfnOutput(self, "ClusterName", value=self.cluster.cluster_name)
        CfnOutput(self, "ApiUrl", value=f"http://{self.alb.load_balancer_dns_name}")
        CfnOutput(self, "CloudFrontUrl", value=self.distribution.domain_name)
