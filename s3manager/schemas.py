from datetime import datetime

from pydantic import BaseModel, Field


class ClientConfig(BaseModel):
    # Left optional so that missing credentials surface as ConfigurationError, not a 422.
    region: str | None = None
    access_key_id: str | None = Field(default=None, alias="accessKeyId")
    secret_access_key: str | None = Field(default=None, alias="secretAccessKey")
    endpoint: str | None = None

    class Config:
        populate_by_name = True


class ConnectRequest(BaseModel):
    config: ClientConfig | None = None


class BucketsRequest(BaseModel):
    config: ClientConfig | None = None


class ObjectsRequest(BaseModel):
    config: ClientConfig | None = None
    bucket: str
    prefix: str = ""


class CreateBucketRequest(BaseModel):
    config: ClientConfig | None = None
    bucket_name: str = Field(alias="bucketName")
    region: str | None = None

    class Config:
        populate_by_name = True


class CreateFolderRequest(BaseModel):
    config: ClientConfig | None = None
    bucket: str
    key: str


class DeleteItem(BaseModel):
    key: str | None = Field(default=None, alias="Key")
    name: str | None = Field(default=None, alias="Name")
    is_bucket: bool = Field(default=False, alias="isBucket")

    class Config:
        populate_by_name = True


class DeleteRequest(BaseModel):
    config: ClientConfig | None = None
    bucket: str | None = None
    items: list[DeleteItem] = Field(default_factory=list)


class BucketOut(BaseModel):
    name: str = Field(alias="Name")
    creation_date: datetime | None = Field(default=None, alias="CreationDate")

    class Config:
        populate_by_name = True


class ObjectOut(BaseModel):
    key: str = Field(alias="Key")
    size: int | None = Field(default=None, alias="Size")
    last_modified: datetime | None = Field(default=None, alias="LastModified")
    etag: str | None = Field(default=None, alias="ETag")
    storage_class: str | None = Field(default=None, alias="StorageClass")

    class Config:
        populate_by_name = True


class PrefixOut(BaseModel):
    prefix: str = Field(alias="Prefix")

    class Config:
        populate_by_name = True


class BucketList(BaseModel):
    buckets: list[BucketOut]


class ObjectListing(BaseModel):
    contents: list[ObjectOut]
    common_prefixes: list[PrefixOut] = Field(alias="commonPrefixes")

    class Config:
        populate_by_name = True


class StatusOut(BaseModel):
    success: bool = True
    message: str


class DefaultsOut(BaseModel):
    region: str
    access_key_id: str = Field(alias="accessKeyId")
    endpoint: str

    class Config:
        populate_by_name = True
