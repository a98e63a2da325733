"""Thin DynamoDB wrapper used by the draft store.

Table names are ``{prefix}-{table}``; the prefix comes from
``DYNAMODB_TABLE_PREFIX`` or defaults to ``gear-rental-{ENVIRONMENT}``.
"""

import os
from typing import Any

import boto3

# One boto3 resource per process
_service: "DynamoDBService | None" = None


def get_dynamodb_service(environment: str | None = None) -> "DynamoDBService":
    """Return the process-wide DynamoDBService, creating it on first use.

    Args:
        environment: Environment name, honoured only when the service is created

    Returns:
        Shared DynamoDBService instance
    """
    global _service
    if _service is None:
        _service = DynamoDBService(environment)
    return _service


def reset_dynamodb_service() -> None:
    """Forget the shared instance so the next call builds a new one.

    Tests call this so a service is created inside each ``mock_aws`` context.
    """
    global _service
    _service = None


class DynamoDBService:
    """Key-value access to prefixed DynamoDB tables."""

    def __init__(self, environment: str | None = None) -> None:
        """Initialize DynamoDB service.

        Args:
            environment: Environment name (dev/prod). Defaults to ENVIRONMENT env var.
        """
        self.environment = environment or os.getenv("ENVIRONMENT", "dev")
        self.name_prefix = os.getenv(
            "DYNAMODB_TABLE_PREFIX", f"gear-rental-{self.environment}"
        )
        self._resource = boto3.resource("dynamodb")

    def table_name(self, table: str) -> str:
        return f"{self.name_prefix}-{table}"

    def _table(self, table: str) -> Any:
        return self._resource.Table(self.table_name(table))

    def get_item(self, table: str, key: dict[str, Any]) -> dict[str, Any] | None:
        """Read one item with a strongly consistent read.

        Args:
            table: Table name without prefix
            key: Primary key

        Returns:
            The item, or None if absent
        """
        response = self._table(table).get_item(Key=key, ConsistentRead=True)
        item: dict[str, Any] | None = response.get("Item")
        return item

    def put_item(self, table: str, item: dict[str, Any]) -> None:
        """Write one item, replacing any item with the same key.

        Args:
            table: Table name without prefix
            item: Full item including its key
        """
        self._table(table).put_item(Item=item)

    def delete_item(
        self,
        table: str,
        key: dict[str, Any],
        return_old: bool = False,
    ) -> dict[str, Any] | None:
        """Delete an item by key.

        Args:
            table: Table name without prefix
            key: Primary key
            return_old: Return the deleted item's attributes

        Returns:
            The deleted item when return_old is set and it existed, else None
        """
        kwargs: dict[str, Any] = {"Key": key}
        if return_old:
            kwargs["ReturnValues"] = "ALL_OLD"
        response = self._table(table).delete_item(**kwargs)
        attrs: dict[str, Any] | None = response.get("Attributes")
        return attrs
