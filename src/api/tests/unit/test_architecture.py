"""Architecture tests using pytest-archon.

These tests enforce DDD boundaries between the IAM and realtime bounded
contexts, and between the layers inside each of them.
"""

import pytest
from pytest_archon import archrule

CONTEXTS = ["iam", "realtime"]


class TestBoundedContextIsolation:
    """Bounded contexts share code only through shared_kernel and infrastructure."""

    def test_iam_does_not_import_realtime(self):
        """Access control knows nothing about the event hub."""
        (
            archrule("iam_no_realtime")
            .match("iam*")
            .should_not_import("realtime*")
            .check("iam")
        )

    def test_realtime_does_not_import_iam(self):
        """The hub consumes resolved identities, never IAM repositories.

        Identity resolution it needs lives in infrastructure.auth_dependencies.
        """
        (
            archrule("realtime_no_iam")
            .match("realtime*")
            .should_not_import("iam*")
            .check("realtime")
        )


class TestSharedKernelBoundaries:
    """The shared kernel depends on no bounded context and no framework."""

    def test_shared_kernel_does_not_import_contexts(self):
        (
            archrule("shared_kernel_no_contexts")
            .match("shared_kernel*")
            .should_not_import("iam*", "realtime*")
            .check("shared_kernel")
        )

    def test_shared_kernel_does_not_import_infrastructure(self):
        (
            archrule("shared_kernel_no_infrastructure")
            .match("shared_kernel*")
            .should_not_import("infrastructure*")
            .check("shared_kernel")
        )

    def test_shared_kernel_does_not_import_fastapi(self):
        (
            archrule("shared_kernel_no_fastapi")
            .match("shared_kernel*")
            .should_not_import("fastapi*", "sqlalchemy*")
            .check("shared_kernel")
        )


@pytest.mark.parametrize("context", CONTEXTS)
class TestLayerBoundaries:
    """Inner layers never reach outward."""

    def test_domain_is_pure(self, context):
        """Domain objects are framework-agnostic and storage-agnostic."""
        (
            archrule(f"{context}_domain_pure")
            .match(f"{context}.domain*")
            .should_not_import(
                f"{context}.application*",
                f"{context}.infrastructure*",
                f"{context}.presentation*",
                "infrastructure*",
                "fastapi*",
                "starlette*",
                "sqlalchemy*",
            )
            .check(context)
        )

    def test_ports_do_not_import_implementations(self, context):
        """Ports define interfaces, not the adapters that fulfil them."""
        (
            archrule(f"{context}_ports_no_adapters")
            .match(f"{context}.ports*")
            .should_not_import(
                f"{context}.application*",
                f"{context}.infrastructure*",
                f"{context}.presentation*",
                "sqlalchemy*",
            )
            .check(context)
        )

    def test_application_does_not_import_infrastructure(self, context):
        """Application services depend on ports, not adapters."""
        (
            archrule(f"{context}_application_no_infrastructure")
            .match(f"{context}.application*")
            .should_not_import(
                f"{context}.infrastructure*",
                f"{context}.presentation*",
                "sqlalchemy*",
                "fastapi*",
            )
            .check(context)
        )

    def test_infrastructure_does_not_import_presentation(self, context):
        (
            archrule(f"{context}_infrastructure_no_presentation")
            .match(f"{context}.infrastructure*")
            .should_not_import(f"{context}.presentation*")
            .check(context)
        )
