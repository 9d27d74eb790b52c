import asyncio
from functools import partial


async def run_sync(func, *args, **kwargs):
    """Run a blocking call in a worker thread so the event loop stays free."""
    return await asyncio.to_thread(partial(func, *args, **kwargs))


async def read_console_line(prompt: str = "") -> str:
    """Read one line from stdin. Raises EOFError at end of input."""
    return await run_sync(input, prompt)
