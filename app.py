import aws_cdk as cdk
from config import get_config
from stacks.serverless_site_stack import ServerlessSiteStack
from stacks.container_site_stack import ContainerSiteStack

app = cdk.App()
config = get_config(app)

# Explicit account/region: the Route53 hosted zone lookup needs them.
env = cdk.Environment(account=config.account, region=config.region)

# =================================================================
# 1. SERVERLESS SITE (S3 + Lambda/API Gateway behind CloudFront)
# =================================================================
serverless_stack = ServerlessSiteStack(
    app, f"ServerlessSite-{config.name}",
    config=config,
    env=env
)

# =================================================================
# 2. CONTAINER SITE (S3 + ECS/ALB behind CloudFront)
# =================================================================
# Independent of the serverless site: no cross-stack references.
container_stack = ContainerSiteStack(
    app, f"ContainerSite-{config.name}",
    config=config,
    env=env
)

if not config.serverless.is_production:
    print("⏭️ Skipping Route53 aliases: only the 'prod' stage gets custom domains")

app.synth()
