"""Resource proxy services, one module per AWS service."""

from .apigateway import APIGatewayService
from .cloudformation import CloudFormationService
from .cloudwatch import CloudWatchService
from .dynamodb import DynamoDBService
from .eventbridge import EventBridgeService
from .iam import IAMService
from .lambda_service import LambdaService
from .logs import LogsService
from .s3 import S3Service
from .scheduler import SchedulerService
from .secrets_manager import SecretsManagerService
from .sqs import SQSService

__all__ = [
    "APIGatewayService",
    "CloudFormationService",
    "CloudWatchService",
    "DynamoDBService",
    "EventBridgeService",
    "IAMService",
    "LambdaService",
    "LogsService",
    "S3Service",
    "SchedulerService",
    "SecretsManagerService",
    "SQSService",
]
