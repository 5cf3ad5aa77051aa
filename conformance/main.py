from conformance.api.main import app


def run_server() -> None:
    import uvicorn

    from conformance.core.options import _env_int, _env_str

    host = _env_str("CONFORMANCE_HOST", "0.0.0.0")
    port = _env_int("CONFORMANCE_PORT", 8001)
    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    run_server()
