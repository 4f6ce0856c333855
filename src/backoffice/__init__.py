"""Back office domain: catalog, leads, users and sessions over DynamoDB."""
