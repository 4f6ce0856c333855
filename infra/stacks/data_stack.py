"""Data infrastructure stack for back office storage resources."""

from __future__ import annotations

from aws_cdk import CfnOutput, RemovalPolicy, Stack
from aws_cdk import aws_dynamodb as dynamodb
from aws_cdk import aws_s3 as s3
from constructs import Construct

# Construct id, partition key and the runtime environment variable naming the table.
TABLES = (
    ("CoursesTable", "id", "COURSES_TABLE"),
    ("EventsTable", "id", "EVENTS_TABLE"),
    ("InquiriesTable", "id", "INQUIRIES_TABLE"),
    ("DemoBookingsTable", "id", "DEMO_BOOKINGS_TABLE"),
    ("EventRegistrationsTable", "id", "EVENT_REGISTRATIONS_TABLE"),
    ("UsersTable", "email", "USERS_TABLE"),
    ("SessionsTable", "token", "SESSIONS_TABLE"),
    ("ContactsTable", "id", "CONTACTS_TABLE"),
    ("ImagesTable", "id", "IMAGES_TABLE"),
)


class DataStack(Stack):
    """Owns the S3 image bucket and one DynamoDB table per document collection."""

    def __init__(self, scope: Construct, construct_id: str, **kwargs) -> None:
        super().__init__(scope, construct_id, **kwargs)

        self.images_bucket = s3.Bucket(
            self,
            "ImagesBucket",
            encryption=s3.BucketEncryption.S3_MANAGED,
            block_public_access=s3.BlockPublicAccess.BLOCK_ALL,
            enforce_ssl=True,
            cors=[
                s3.CorsRule(
                    allowed_methods=[s3.HttpMethods.PUT],
                    allowed_origins=["*"],
                    allowed_headers=["*"],
                )
            ],
            removal_policy=RemovalPolicy.RETAIN,
        )

        table_kwargs = {
            "billing_mode": dynamodb.BillingMode.PAY_PER_REQUEST,
            "removal_policy": RemovalPolicy.RETAIN,
            "point_in_time_recovery": True,
        }

        self.tables: dict[str, dynamodb.Table] = {}
        for construct_name, partition_key, env_var in TABLES:
            extra = {"time_to_live_attribute": "ttl"} if env_var == "SESSIONS_TABLE" else {}
            table = dynamodb.Table(
                self,
                construct_name,
                partition_key=dynamodb.Attribute(name=partition_key, type=dynamodb.AttributeType.STRING),
                **table_kwargs,
                **extra,
            )
            self.tables[env_var] = table
            CfnOutput(
                self,
                f"{construct_name}Name",
                value=table.table_name,
                description=f"Value for {env_var}",
            )

        CfnOutput(
            self,
            "ImagesBucketName",
            value=self.images_bucket.bucket_name,
            description="Course and event image bucket name",
        )

    def table_environment(self) -> dict[str, str]:
        return {env_var: table.table_name for env_var, table in self.tables.items()}
