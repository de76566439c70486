"""HTTP routers, one per AWS service, mounted under ``/api``."""

from fastapi import APIRouter

from . import (
    apigateway,
    cloudformation,
    cloudwatch,
    dynamodb,
    eventbridge,
    health,
    iam,
    lambda_functions,
    s3,
    scheduler,
    secrets_manager,
    sqs,
)

router = APIRouter()

router.include_router(health.router, tags=["health"])
router.include_router(s3.router, prefix="/s3", tags=["s3"])
router.include_router(sqs.router, prefix="/sqs", tags=["sqs"])
router.include_router(dynamodb.router, prefix="/dynamodb", tags=["dynamodb"])
router.include_router(secrets_manager.router, prefix="/secrets-manager", tags=["secretsmanager"])
router.include_router(lambda_functions.router, prefix="/lambda", tags=["lambda"])
router.include_router(iam.router, prefix="/iam", tags=["iam"])
# Log groups are served under the CloudWatch prefix as well.
router.include_router(cloudwatch.router, prefix="/cloudwatch", tags=["cloudwatch"])
router.include_router(eventbridge.router, prefix="/eventbridge", tags=["eventbridge"])
router.include_router(scheduler.router, prefix="/scheduler", tags=["scheduler"])
router.include_router(cloudformation.router, prefix="/cloudformation", tags=["cloudformation"])
router.include_router(apigateway.router, prefix="/apigateway", tags=["apigateway"])


__all__ = ["router"]
