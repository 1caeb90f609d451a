import pytest
from botocore.exceptions import ClientError
from fastapi.testclient import TestClient

from addon_api.config import Settings
from addon_api.dispatch import BuildDispatcher
from addon_api.package_resolution import PackageResolver
from addon_api.services.addon_service import AddonService
from addon_api.storage import ArtifactStorage


class FakeS3Client:
    """Records S3 calls; objects live in a dict keyed by object key."""

    def __init__(self, calls, objects=None, head_error_code="404"):
        self.calls = calls
        self.objects = objects if objects is not None else {}
        self.head_error_code = head_error_code
        self.head_error = None
        self.put_error = None

    def head_object(self, Bucket, Key):
        self.calls.append(("head_object", Bucket, Key))
        if self.head_error:
            raise self.head_error
        if Key not in self.objects:
            raise ClientError(
                {"Error": {"Code": self.head_error_code, "Message": "Not Found"}},
                "HeadObject",
            )
        return {"ContentLength": len(self.objects[Key])}

    def put_object(self, **kwargs):
        self.calls.append(("put_object", kwargs["Bucket"], kwargs["Key"]))
        if self.put_error:
            raise self.put_error
        self.objects[kwargs["Key"]] = kwargs
        return {"ETag": '"etag"'}


class FakeLambdaClient:
    """Records Lambda invocations."""

    def __init__(self, calls, status_code=202):
        self.calls = calls
        self.status_code = status_code
        self.invocations = []
        self.invoke_error = None

    def invoke(self, **kwargs):
        self.calls.append(("invoke", kwargs["FunctionName"], kwargs["Payload"]))
        if self.invoke_error:
            raise self.invoke_error
        self.invocations.append(kwargs)
        return {"StatusCode": self.status_code}


@pytest.fixture
def settings(httpserver):
    return Settings(
        env="test",
        addon_bucket_name="bucket",
        scheduler_function_name="addon-builder-scheduler-test",
        registry_url=httpserver.url_for("/"),
        builder_ember_versions={
            "3-4": r"^3\.4\.",
            "2-18": r"^2\.18\.",
            "2-x": r"^2\.",
        },
    )


@pytest.fixture
def calls():
    return []


@pytest.fixture
def s3_client(calls):
    return FakeS3Client(calls)


@pytest.fixture
def lambda_client(calls):
    return FakeLambdaClient(calls)


@pytest.fixture
def service(settings, s3_client, lambda_client):
    resolver = PackageResolver(
        registry_url=settings.registry_url,
        builder_ember_versions=settings.builder_ember_versions,
        keyword=settings.addon_keyword,
    )
    storage = ArtifactStorage(settings.addon_bucket_name, s3_client)
    dispatcher = BuildDispatcher(settings.scheduler_function_name, lambda_client)
    return AddonService(settings, resolver, storage, dispatcher)


@pytest.fixture
def app(service):
    from addon_api.main import app as real_app
    from addon_api.routers.api import addon_service

    real_app.dependency_overrides[addon_service] = lambda: service
    yield real_app
    real_app.dependency_overrides.clear()


@pytest.fixture
def client(app):
    yield TestClient(app)


@pytest.fixture
def registry(httpserver):
    """Fake npm registry serving a few package documents"""
    httpserver.expect_request("/ember-cli-x/1.0.0").respond_with_json(
        {
            "name": "ember-cli-x",
            "version": "1.0.0",
            "keywords": ["ember-addon", "x"],
        }
    )
    httpserver.expect_request("/ember-cli-x/latest").respond_with_json(
        {
            "name": "ember-cli-x",
            "version": "1.2.0",
            "keywords": ["ember-addon"],
        }
    )
    httpserver.expect_request("/left-pad/1.3.0").respond_with_json(
        {"name": "left-pad", "version": "1.3.0", "keywords": ["leftpad", "string"]}
    )
    httpserver.expect_request("/no-keywords/1.0.0").respond_with_json(
        {"name": "no-keywords", "version": "1.0.0"}
    )
    httpserver.expect_request("/ember-cli-x/9.9.9").respond_with_json(
        "version not found: 9.9.9", status=404
    )
    httpserver.expect_request("/broken/1.0.0").respond_with_data(
        "<html>Bad Gateway</html>", status=502, content_type="text/html"
    )
    return httpserver
