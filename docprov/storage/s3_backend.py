from collections.abc import Mapping
from typing import Any

import boto3
from botocore.config import Config as BotoConfig
from botocore.exceptions import BotoCoreError, ClientError

from docprov.storage.base import BaseObjectBackend
from docprov.storage.exceptions import ContentNotFoundError, StorageUnavailableError
from docprov.storage.models import RemoteStats

_MISSING_CODES = {"NoSuchKey", "404", "NotFound"}


class S3Backend(BaseObjectBackend):
    """Secondary mirror backed by an S3-compatible bucket."""

    kind = "s3"

    def __init__(
        self,
        *,
        bucket: str,
        region: str,
        timeout_seconds: int,
        endpoint_url: str | None = None,
        access_key: str | None = None,
        secret_key: str | None = None,
        client: Any = None,
    ) -> None:
        self._bucket = bucket
        self._client = client or boto3.client(
            "s3",
            endpoint_url=endpoint_url,
            aws_access_key_id=access_key,
            aws_secret_access_key=secret_key,
            region_name=region,
            config=BotoConfig(
                signature_version="s3v4",
                connect_timeout=timeout_seconds,
                read_timeout=timeout_seconds,
                retries={"max_attempts": 1},
            ),
        )

    def put_object(self, key: str, data: bytes, metadata: Mapping[str, str]) -> str:
        self._call(
            "put_object",
            Bucket=self._bucket,
            Key=key,
            Body=data,
            ServerSideEncryption="AES256",
            Metadata=dict(metadata),
            Tagging="Type=Document",
        )
        return f"s3://{self._bucket}/{key}"

    def get_object(self, key: str) -> tuple[bytes, dict[str, str]]:
        response = self._call("get_object", Bucket=self._bucket, Key=key)
        return response["Body"].read(), dict(response.get("Metadata", {}))

    def list_keys(self, prefix: str) -> list[str]:
        return sorted(obj["Key"] for obj in self._iter_objects(prefix))

    def delete_objects(self, keys: list[str]) -> None:
        if not keys:
            return
        response = self._call(
            "delete_objects",
            Bucket=self._bucket,
            Delete={"Objects": [{"Key": key} for key in keys]},
        )
        errors = response.get("Errors", [])
        if errors:
            failed = ", ".join(f"{e.get('Key')}: {e.get('Message')}" for e in errors)
            raise StorageUnavailableError(f"S3 refused to delete {failed}")

    def stats(self) -> RemoteStats:
        count = 0
        total = 0
        for obj in self._iter_objects(""):
            count += 1
            total += int(obj.get("Size", 0))
        return RemoteStats(object_count=count, total_size=total)

    def _iter_objects(self, prefix: str) -> list[dict[str, Any]]:
        objects: list[dict[str, Any]] = []
        kwargs: dict[str, Any] = {"Bucket": self._bucket, "Prefix": prefix}
        while True:
            response = self._call("list_objects_v2", **kwargs)
            objects.extend(response.get("Contents", []))
            if not response.get("IsTruncated"):
                return objects
            kwargs["ContinuationToken"] = response["NextContinuationToken"]

    def _call(self, operation: str, **kwargs: Any) -> Any:
        try:
            return getattr(self._client, operation)(**kwargs)
        except ClientError as exc:
            code = str(exc.response.get("Error", {}).get("Code", ""))
            if code in _MISSING_CODES:
                raise ContentNotFoundError(f"S3 {operation}: {kwargs.get('Key')} not found") from exc
            raise StorageUnavailableError(f"S3 {operation} failed: {exc}") from exc
        except BotoCoreError as exc:
            raise StorageUnavailableError(f"S3 {operation} unreachable: {exc}") from exc
