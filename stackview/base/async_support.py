"""
Async support for Stackview.

Provides an ``async_wrap`` decorator that converts any synchronous method
into an awaitable coroutine using :func:`asyncio.to_thread`. boto3 clients
are blocking, so every proxy service keeps a synchronous implementation
and the HTTP handlers await the generated ``a<method>`` variants.

Usage::

    from stackview.base.async_support import async_wrap

    class BucketService:
        def list_buckets(self) -> dict:
            ...

        alist_buckets = async_wrap(list_buckets)

    # Then in async code:
    result = await svc.alist_buckets()
"""

from __future__ import annotations

import asyncio
import functools
import inspect
from typing import Any, Callable, Coroutine, TypeVar

T = TypeVar("T")


def async_wrap(
    fn: Callable[..., T],
) -> Callable[..., Coroutine[Any, Any, T]]:
    """Return an async version of *fn* that runs it in a worker thread.

    Args:
        fn: A synchronous callable to wrap.

    Returns:
        An async callable with the same parameters and return type.
    """

    @functools.wraps(fn)
    async def _wrapper(*args: Any, **kwargs: Any) -> T:
        return await asyncio.to_thread(fn, *args, **kwargs)

    return _wrapper


async def run_concurrently(*calls: Callable[[], T]) -> list[T]:
    """Run zero-argument blocking callables in threads and wait for all.

    The first exception raised by any call propagates once every call has
    finished.
    """
    results = await asyncio.gather(
        *(asyncio.to_thread(call) for call in calls), return_exceptions=True
    )
    for result in results:
        if isinstance(result, BaseException):
            raise result
    return list(results)  # type: ignore[arg-type]


class AsyncMixin:
    """Mixin that auto-generates ``a<method>`` async variants.

    Every public, non-coroutine method defined on a subclass gets an
    awaitable twin created once at class definition time.

    Example::

        class S3Service(ProxyService):
            def create_bucket(self, bucket_name): ...
            # => await self.acreate_bucket(bucket_name) is now available
    """

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        for name in list(vars(cls)):
            if name.startswith("_"):
                continue
            attr = vars(cls)[name]
            if isinstance(attr, (staticmethod, classmethod, property)):
                continue
            if callable(attr) and not inspect.iscoroutinefunction(attr):
                async_name = f"a{name}"
                if not hasattr(cls, async_name):
                    setattr(cls, async_name, async_wrap(attr))
