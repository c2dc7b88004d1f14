from time import sleep, perf_counter

from ferrocore import NOTHING, Iter, Some
from ferrocore.utils import setup_logging

logger = setup_logging()


def expensive_transform(x):
    # Simulate a costly step so laziness is visible
    print(f"  computing f({x}) ...")
    sleep(0.05)  # pretend this is expensive
    return x * x


print("\n--- Demo: laziness (no work until pulled) ---")
pipeline = (
    Iter.from_iterable(range(1, 10_000))
    .map(expensive_transform)   # expensive; watch when it runs
    .filter(lambda v: v % 2 == 0)
    .skip(3)
    .take(5)
)

print("Constructed pipeline. No output yet (nothing computed).")
print("\nCollecting (should compute only what's needed for 5 items):")
t0 = perf_counter()
out = pipeline.collect()
t1 = perf_counter()
print(f"Result: {out}")
print(f"Time: {t1 - t0:.2f}s\n")

print("--- Demo: short-circuiting terminals ---")
found = Iter.from_iterable(range(1, 30)).map(expensive_transform).find(lambda v: v > 50)
print(f"First square above 50: {found}\n")

print("--- Demo: filter_map with an explicit Option ---")
total = (
    Iter.from_iterable(range(1, 11))
    .filter(lambda x: x % 2 == 0)
    .map(lambda x: x * 3)
    .filter_map(lambda x: Some(x) if x > 20 else NOTHING)
    .fold(0, lambda acc, x: acc + x)
)
print(f"Sum of tripled evens above 20: {total}\n")

print("--- Demo: chunking ---")
for chunk in Iter.from_iterable(range(1, 12)).map(expensive_transform).chunk(4).take(2):
    print("  chunk:", chunk)
print()

print("--- Demo: zip and enumerate ---")
pairs = Iter.from_iterable([1, 2]).zip(["a", "b", "c"]).enumerate().collect()
print(f"Pairs: {pairs}")

print("\n--- Demo: spent pipelines stay empty ---")
spent = Iter.from_iterable([1, 2, 3])
print(f"First collect: {spent.collect()}, second collect: {spent.collect()}")
logger.info("Demo finished")
