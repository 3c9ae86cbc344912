"""Tests for the CLI entry point."""

from unittest.mock import patch


class TestCli:
    def test_main_loads_env_and_serves(self):
        """main() calls load_dotenv and hands the app to uvicorn."""
        with patch("dotenv.load_dotenv") as mock_ld:
            with patch("uvicorn.run") as mock_run:
                from techhub.cli import main
                main(["--host", "0.0.0.0", "--port", "9000"])
                mock_ld.assert_called_once()
                mock_run.assert_called_once()
                _, kwargs = mock_run.call_args
                assert kwargs == {"host": "0.0.0.0", "port": 9000}

    def test_app_settings_resolved_per_request(self):
        with patch("dotenv.load_dotenv"), patch("uvicorn.run") as mock_run:
            from techhub.cli import main
            main([])
            app = mock_run.call_args.args[0]
            assert app.state.settings is None

    def test_main_callable(self):
        from techhub.cli import main
        assert callable(main)
