# app/run_signal_http.py
import asyncio, signal, os, argparse
import uvicorn
import contextlib

from agent.llm_factory import configure_llm_factory
from agent.states import SignalDesk
from app.control import build_app
from utils.config import load_cfg
from utils.logger import logger


def env_default(name: str, default=None):
    return os.getenv(name, default)

def build_parser():
    p = argparse.ArgumentParser("signal-desk")
    p.add_argument("--host",        default=env_default("CONTROL_HOST", None))
    p.add_argument("--port",        type=int, default=int(env_default("CONTROL_PORT", "0") or 0))
    p.add_argument("--config-path", default=env_default("AGENT_CONFIG_YAML", None))
    return p

async def main():
    args = build_parser().parse_args()

    cfg = load_cfg(args.config_path)
    configure_llm_factory(cfg)

    host = args.host or cfg.get("control", {}).get("host", "127.0.0.1")
    port = args.port or int(cfg.get("control", {}).get("port", 8080))

    desk = SignalDesk.from_cfg(cfg)
    app = build_app(desk)
    server = uvicorn.Server(
        uvicorn.Config(app, host=host,
                            port=port,
                            loop="asyncio",
                            lifespan="off",
                            timeout_keep_alive=10,
                            log_config=None,
                            access_log=False)
    )

    http_task = asyncio.create_task(server.serve(), name="http")
    logger.info(f"Signal desk listening on http://{host}:{port}")
    stop_event = asyncio.Event()

    def _graceful(*_):
        stop_event.set()

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, _graceful)
        except NotImplementedError:
            pass  # Windows

    await stop_event.wait()
    server.should_exit = True
    with contextlib.suppress(asyncio.CancelledError):
        await http_task

if __name__ == "__main__":
    asyncio.run(main())
