"""Show a proxy whose backend is exchanged while worker threads keep calling it."""

import abc
import argparse
import io
import logging
import pathlib
import sys
import threading
import time


def _ensure_src_path(src_path: str) -> None:
    """Ensure ``src`` is importable in the current interpreter.

    :param src_path: Absolute path to the repository ``src`` directory.
    """
    exists: bool = src_path in sys.path
    if exists is False:
        sys.path.insert(0, src_path)


_ensure_src_path(str(pathlib.Path(__file__).resolve().parent.parent / "src"))

from swapproxy import hotswap_proxy  # noqa: E402
from swapproxy import read_method  # noqa: E402
from swapproxy import resolve_method  # noqa: E402
from swapproxy import swap  # noqa: E402
from swapproxy import write_method  # noqa: E402


class PriceSource(abc.ABC):
    """Backend answering price queries."""

    @abc.abstractmethod
    def quote(self, symbol: str) -> int:
        """Return the price for ``symbol`` in cents."""


class PrimarySource(PriceSource):
    """Backend in use at startup."""

    def quote(self, symbol: str) -> int:
        return 100 + len(symbol)


class FallbackSource:
    """Replacement backend that only matches ``PriceSource`` structurally."""

    def quote(self, symbol: str) -> int:
        return 200 + len(symbol)


def _worker(source: PriceSource, calls: int, results: list[int], lock: threading.Lock) -> None:
    """Query ``source`` repeatedly.

    :param source: Proxy shared by every worker.
    :param calls: Number of queries.
    :param results: Shared result list.
    :param lock: Guard for ``results``.
    """
    for _ in range(calls):
        price: int = source.quote("ACME")
        with lock:
            results.append(price)


def _parse_args() -> argparse.Namespace:
    """Parse CLI arguments.

    :returns: Parsed CLI arguments.
    """
    parser = argparse.ArgumentParser(
        description="Exchange the backend behind a proxy while worker threads keep using it."
    )
    parser.add_argument("--threads", type=int, default=4, help="Number of worker threads.")
    parser.add_argument("--calls", type=int, default=2_000, help="Queries issued by each worker.")
    parser.add_argument("--log-level", default="WARNING", help="Logging level for the swapproxy loggers.")
    return parser.parse_args()


def main() -> int:
    """Run the demonstration.

    :returns: Process exit code where ``0`` indicates success.
    """
    args: argparse.Namespace = _parse_args()
    threads: int = int(args.threads)
    calls: int = int(args.calls)
    if threads < 1:
        print("threads must be >= 1")
        return 1
    if calls < 1:
        print("calls must be >= 1")
        return 1
    logging.basicConfig(level=str(args.log_level).upper())

    print("Swappable Proxy Demo")
    print(f"python={sys.version.split()[0]}")
    print(f"threads={threads} calls={calls}")
    print("")

    proxy: PriceSource = (
        hotswap_proxy(PriceSource).with_(PrimarySource()).mode("signature").build()  # type: ignore[assignment]
    )
    results: list[int] = []
    lock: threading.Lock = threading.Lock()
    workers: list[threading.Thread] = [
        threading.Thread(target=_worker, args=(proxy, calls, results, lock)) for _ in range(threads)
    ]

    start: float = time.perf_counter()
    for worker in workers:
        worker.start()
    previous: object = swap(proxy, FallbackSource())
    for worker in workers:
        worker.join()
    elapsed: float = time.perf_counter() - start

    primary_count: int = results.count(104)
    fallback_count: int = results.count(204)
    print("Phase 1: concurrent queries across a swap")
    print(f"  replaced={type(previous).__name__}")
    print(f"  primary_answers={primary_count} fallback_answers={fallback_count}")
    print(f"  elapsed_seconds={elapsed:.3f}")
    print("")

    buffer: io.BytesIO = io.BytesIO()
    write_method(buffer, resolve_method(PrimarySource, "quote", ["ACME"]))
    buffer.seek(0)
    relocated_price: object = read_method(buffer).invoke(PrimarySource(), ["ACME"])
    print("Phase 2: method identity through a byte stream")
    print(f"  encoded_bytes={len(buffer.getvalue())} relocated_price={relocated_price}")
    print("")

    all_answered: bool = primary_count + fallback_count == threads * calls
    after_swap_ok: bool = proxy.quote("ACME") == 204
    relocation_ok: bool = relocated_price == 104
    demo_passes: bool = all_answered is True and after_swap_ok is True and relocation_ok is True
    if demo_passes is True:
        print("DEMO RESULT: PASS")
        return 0

    print("DEMO RESULT: FAIL")
    print(
        "  "
        + f"all_answered={all_answered} "
        + f"after_swap_ok={after_swap_ok} "
        + f"relocation_ok={relocation_ok}"
    )
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
