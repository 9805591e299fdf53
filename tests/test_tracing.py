"""
Tracing Module Tests
====================
Tests for OpenTelemetry tracing setup around build runs.
"""

import pytest
from unittest.mock import patch, MagicMock


class TestTracingSetup:
    """Tests for tracing module configuration."""

    @pytest.mark.unit
    def test_service_name_constant(self):
        from cloud_icons.tracing import SERVICE_NAME_VALUE

        assert SERVICE_NAME_VALUE == "cloud-icons-build"

    @pytest.mark.unit
    @patch('cloud_icons.tracing.atexit')
    @patch('cloud_icons.tracing.TracerProvider')
    @patch('cloud_icons.tracing.OTLPSpanExporter')
    @patch('cloud_icons.tracing.BatchSpanProcessor')
    @patch('cloud_icons.tracing.trace')
    @patch('cloud_icons.tracing.HTTPXClientInstrumentor')
    def test_setup_tracing_instruments_httpx(
        self, mock_httpx, mock_trace, mock_processor, mock_exporter, mock_provider, mock_atexit
    ):
        """Archive downloads should be traced once tracing is enabled."""
        from cloud_icons.tracing import setup_tracing

        mock_trace.get_tracer.return_value = MagicMock()

        setup_tracing("icons-test")

        mock_provider.assert_called_once()
        mock_trace.set_tracer_provider.assert_called_once()
        mock_httpx.return_value.instrument.assert_called_once()
        mock_trace.get_tracer.assert_called_with("icons-test")
        mock_atexit.register.assert_called_once()

    @pytest.mark.unit
    def test_init_tracing_returns_usable_tracer_when_disabled(self):
        from cloud_icons import tracing

        with patch.object(tracing, "_tracer", None), patch.object(tracing, "ENABLE_TRACING", False):
            tracer = tracing.init_tracing()
            with tracer.start_as_current_span("noop") as span:
                tracing.safe_set_span_attributes(span, {"provider": "aws"})


class TestSafeSetSpanAttributes:

    @pytest.mark.unit
    def test_coerces_values(self):
        from cloud_icons.tracing import safe_set_span_attributes

        span = MagicMock()
        safe_set_span_attributes(
            span,
            {
                "provider": "aws",
                "icon_count": 3,
                "skipped": False,
                "failed_icons": ["a", "b"],
                "resolved_aliases": {"compute": "ec2"},
                "output_path": None,
                "": "ignored",
            },
        )

        calls = {c.args[0]: c.args[1] for c in span.set_attribute.call_args_list}
        assert calls == {
            "provider": "aws",
            "icon_count": 3,
            "skipped": False,
            "failed_icons": ["a", "b"],
            "resolved_aliases": '{"compute": "ec2"}',
        }

    @pytest.mark.unit
    def test_ignores_missing_span(self):
        from cloud_icons.tracing import safe_set_span_attributes

        safe_set_span_attributes(None, {"provider": "aws"})


@pytest.mark.unit
@patch('cloud_icons.tracing.trace')
def test_get_tracer_defaults_to_service_name(mock_trace):
    from cloud_icons.tracing import get_tracer, SERVICE_NAME_VALUE

    get_tracer()

    mock_trace.get_tracer.assert_called_with(SERVICE_NAME_VALUE)
