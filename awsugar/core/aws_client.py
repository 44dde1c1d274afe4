"""
AWS Client Module
=================

Owns the authenticated boto3 session a cleanup run talks to.

One :class:`AWSClient` is built at startup from ``--region`` and
``--profile`` (or whatever boto3 discovers in the environment) and is
handed, through the run context, to every listing, snapshot and
deletion call. Only three services are ever needed:

- ``ec2`` for instances, volumes, snapshots and network interfaces
- ``elb`` for classic load balancers
- ``sts`` to check who we are before touching anything

Example
-------
>>> from awsugar.core.aws_client import AWSClient
>>>
>>> client = AWSClient(region="us-west-2", profile="production")
>>> client.validate_credentials()
True
>>> client.get_ec2_client().describe_volumes()
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import boto3
from botocore.config import Config
from botocore.exceptions import (
    ClientError,
    NoCredentialsError,
    NoRegionError,
    ProfileNotFound,
)

from awsugar.core.exceptions import (
    AWSClientError,
    CredentialsError,
    RegionError,
    ServiceError,
)

# Module logger
logger = logging.getLogger(__name__)

DEFAULT_REGION = "us-west-2"

# STS error codes meaning the keys themselves are wrong
BAD_KEY_CODES = ("InvalidClientTokenId", "SignatureDoesNotMatch", "ExpiredToken")


class AWSClient:
    """
    Session holder and service client factory for one region.

    Parameters
    ----------
    region : str, default="us-west-2"
        Region every call of the run is made in.
    profile : str, optional
        Named profile from the shared credentials file.
    max_retries : int, default=3
        Attempts per API call (adaptive retry mode).
    timeout : int, default=30
        Connect and read timeout in seconds.

    Raises
    ------
    CredentialsError
        Unknown profile, missing or rejected credentials.
    RegionError
        No usable region.
    ServiceError
        A service client cannot be built.
    """

    SERVICES = {
        "ec2": "Amazon EC2",
        "elb": "Elastic Load Balancing (Classic)",
        "sts": "AWS Security Token Service",
    }

    def __init__(
        self,
        region: str = DEFAULT_REGION,
        profile: Optional[str] = None,
        max_retries: int = 3,
        timeout: int = 30,
    ) -> None:
        self.region = region
        self.profile = profile
        self.max_retries = max_retries
        self.timeout = timeout

        self._session: Optional[boto3.Session] = None
        self._clients: Dict[str, Any] = {}
        self._identity: Optional[Dict[str, str]] = None

        logger.debug(f"AWSClient for {region} (profile={profile or 'default'})")

    @property
    def config(self) -> Config:
        return Config(
            region_name=self.region,
            retries={"max_attempts": self.max_retries, "mode": "adaptive"},
            connect_timeout=self.timeout,
            read_timeout=self.timeout,
        )

    @property
    def session(self) -> boto3.Session:
        """The boto3 session, opened on first use."""
        if self._session is None:
            try:
                self._session = boto3.Session(
                    region_name=self.region,
                    profile_name=self.profile,
                )
            except ProfileNotFound as e:
                raise CredentialsError(
                    f"AWS profile '{self.profile}' not found",
                    details={"profile": self.profile},
                ) from e
            logger.debug(f"Opened boto3 session in {self.region}")
        return self._session

    def client(self, service_name: str) -> Any:
        """
        Return the cached boto3 client for ``service_name``.

        Parameters
        ----------
        service_name : str
            One of :attr:`SERVICES`.
        """
        if service_name not in self._clients:
            self._clients[service_name] = self._build_client(service_name)
        return self._clients[service_name]

    def _build_client(self, service_name: str) -> Any:
        try:
            return self.session.client(service_name, config=self.config)
        except AWSClientError:
            raise
        except NoCredentialsError as e:
            raise CredentialsError(
                "AWS credentials not found",
                details={"hint": "Run 'aws configure' or export AWS_ACCESS_KEY_ID"},
            ) from e
        except NoRegionError as e:
            raise RegionError(
                f"Invalid or missing region: {self.region}",
                region=self.region,
            ) from e
        except Exception as e:
            logger.exception(f"Couldn't create the {service_name} client")
            raise ServiceError(
                f"Couldn't create {self.SERVICES.get(service_name, service_name)} "
                f"client: {e}",
                service=service_name,
                region=self.region,
            ) from e

    def get_ec2_client(self) -> Any:
        """Client for instances, volumes, snapshots and network interfaces."""
        return self.client("ec2")

    def get_elb_client(self) -> Any:
        """Client for classic load balancers."""
        return self.client("elb")

    # =========================================================================
    # Identity
    # =========================================================================

    def caller_identity(self) -> Dict[str, str]:
        """
        STS GetCallerIdentity, fetched once per client.

        Raises
        ------
        CredentialsError
            If the credentials are missing or rejected.
        """
        if self._identity is not None:
            return self._identity

        try:
            self._identity = self.client("sts").get_caller_identity()
        except AWSClientError:
            raise
        except ClientError as e:
            code = e.response.get("Error", {}).get("Code", "Unknown")
            if code in BAD_KEY_CODES:
                raise CredentialsError(
                    "Invalid AWS credentials",
                    details={"error_code": code},
                ) from e
            raise CredentialsError(f"Failed to validate credentials: {e}") from e
        except NoCredentialsError as e:
            raise CredentialsError("AWS credentials not found") from e

        logger.info(f"Running as {self._identity.get('Arn')}")
        return self._identity

    def validate_credentials(self) -> bool:
        """Check the credentials against STS; raises CredentialsError if bad."""
        self.caller_identity()
        return True

    def get_account_id(self) -> str:
        """AWS account ID of the current credentials."""
        return self.caller_identity()["Account"]

    def with_region(self, region: str) -> AWSClient:
        """Same profile and retry settings, another region."""
        return AWSClient(
            region=region,
            profile=self.profile,
            max_retries=self.max_retries,
            timeout=self.timeout,
        )

    def __enter__(self) -> AWSClient:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self._clients.clear()
        self._session = None
        self._identity = None

    def __repr__(self) -> str:
        return (
            f"AWSClient(region='{self.region}', "
            f"profile={self.profile!r}, "
            f"max_retries={self.max_retries})"
        )
