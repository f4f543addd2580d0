import os
import multiprocessing

# Numba and BLAS thread pools: one JIT worker pool sized to the machine,
# single-threaded BLAS so that batch pools do not oversubscribe CPU cores
os.environ.setdefault("NUMBA_THREADING_LAYER", "workqueue")
os.environ.setdefault("NUMBA_NUM_THREADS", str(max(1, (os.cpu_count() or 1))))
os.environ.setdefault("OMP_NUM_THREADS", "1")
os.environ.setdefault("MKL_NUM_THREADS", "1")
os.environ.setdefault("OPENBLAS_NUM_THREADS", "1")

# Batch pools re-import the package in workers; "spawn" avoids forking a
# process that already holds JIT and BLAS state
if multiprocessing.get_start_method(allow_none=True) is None:
    multiprocessing.set_start_method("spawn", force=True)
