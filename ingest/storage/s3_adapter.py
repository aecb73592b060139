"""S3-compatible object storage (AWS S3, MinIO, etc.)."""

from io import BytesIO
from typing import Any, BinaryIO

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from ingest.storage.base import BaseStorageBackend
from ingest.storage.exceptions import StorageError
from ingest.upload.models import Visibility

ACLS: dict[Visibility, str] = {
    Visibility.PUBLIC: "public-read",
    Visibility.PRIVATE: "private",
}


class S3StorageBackend(BaseStorageBackend):
    """Stores objects in an S3 bucket, mapping visibility to canned ACLs.

    Object stores have no real directories; `make_directory` writes a
    zero-byte `prefix/` marker so that `exists` reports the directory.
    """

    def __init__(
        self,
        bucket: str,
        region: str = "us-east-1",
        endpoint_url: str | None = None,
        access_key: str | None = None,
        secret_key: str | None = None,
        client: Any = None,
    ) -> None:
        self.bucket = bucket
        if client is None:
            extra = {} if endpoint_url is None else {"endpoint_url": endpoint_url}
            client = boto3.client(
                "s3",
                region_name=region,
                aws_access_key_id=access_key,
                aws_secret_access_key=secret_key,
                **extra,
            )
        self._client = client

    def exists(self, path: str) -> bool:
        key = path.strip("/")
        try:
            self._client.head_object(Bucket=self.bucket, Key=key)
            return True
        except ClientError as exc:
            if exc.response["Error"]["Code"] not in ("404", "NoSuchKey"):
                raise StorageError(path, str(exc)) from exc
        except BotoCoreError as exc:
            raise StorageError(path, str(exc)) from exc
        try:
            response = self._client.list_objects_v2(
                Bucket=self.bucket, Prefix=f"{key}/", MaxKeys=1
            )
        except (BotoCoreError, ClientError) as exc:
            raise StorageError(path, str(exc)) from exc
        return bool(response.get("Contents"))

    def make_directory(self, path: str, visibility: Visibility | str = Visibility.PUBLIC) -> None:
        key = f"{path.strip('/')}/"
        acl = self._acl(path, visibility)
        try:
            self._client.put_object(Bucket=self.bucket, Key=key, Body=b"", ACL=acl)
        except (BotoCoreError, ClientError) as exc:
            raise StorageError(path, str(exc)) from exc

    def put(self, path: str, data: bytes, visibility: Visibility | str = Visibility.PUBLIC) -> bool:
        self._upload(path, BytesIO(data), visibility)
        return True

    def put_file_as(
        self,
        directory: str,
        source: BinaryIO,
        name: str,
        visibility: Visibility | str = Visibility.PUBLIC,
    ) -> bool:
        path = f"{directory.strip('/')}/{name}" if directory.strip("/") else name
        source.seek(0)
        self._upload(path, source, visibility)
        source.seek(0)
        return True

    def _upload(self, path: str, body: BinaryIO, visibility: Visibility | str) -> None:
        acl = self._acl(path, visibility)
        try:
            self._client.upload_fileobj(
                body,
                self.bucket,
                path.lstrip("/"),
                ExtraArgs={"ACL": acl},
            )
        except (BotoCoreError, ClientError) as exc:
            raise StorageError(path, str(exc)) from exc

    @staticmethod
    def _acl(path: str, visibility: Visibility | str) -> str:
        try:
            return ACLS[Visibility(visibility)]
        except ValueError as exc:
            raise StorageError(path, f"unknown visibility '{visibility}'") from exc
