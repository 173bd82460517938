"""Example: retrying a flaky call with expbackoff"""

import asyncio
import logging
import random

from expbackoff import (
    OperationExhausted,
    arun_to_completion,
    create_sequence,
    run_to_completion,
)

logging.basicConfig(level=logging.DEBUG, format="%(name)s - %(levelname)s - %(message)s")


def flaky_fetch(attempt: int) -> str:
    if random.random() < 0.6:
        raise ConnectionError(f"connection reset on attempt {attempt}")
    return f"payload from attempt {attempt}"


async def flaky_fetch_async(attempt: int) -> str:
    await asyncio.sleep(0.01)
    return flaky_fetch(attempt)


def main():
    options = {"maxAttempts": 6, "delayInterval": 20, "seed": 7}

    try:
        print(run_to_completion(flaky_fetch, options))
    except OperationExhausted as e:
        print(f"gave up: {e.last_error}")

    # Manual iteration: stop after two attempts, resume later
    driver = create_sequence(flaky_fetch, {**options, "throwOnExhaustion": False})
    for attempt in driver:
        if attempt == 1:
            break
    print(f"paused at attempt {driver.value}, done={driver.done}")
    for _ in driver:
        pass
    print(f"finished: result={driver.result!r}, last_error={driver.last_error!r}")

    print(asyncio.run(arun_to_completion(flaky_fetch_async, {**options, "throwOnExhaustion": False})))


if __name__ == "__main__":
    main()
