import sys
import time
from concurrent.futures import ThreadPoolExecutor, wait
from .core import Tree, DisposedTreeError
from .mesh import Mesh, finalize_mesh, DEFAULT_SPLITTING_ANGLE

DEFAULT_RESOLUTION = 0.05

def _normalize_region(region):
    lower, upper = region
    lower, upper = tuple(float(v) for v in lower), tuple(float(v) for v in upper)
    if len(lower) != 3 or len(upper) != 3:
        raise ValueError(f"Region must be ((min_x, min_y, min_z), (max_x, max_y, max_z)), got {region!r}.")
    return lower, upper

def _polygonize(tree: Tree, region, resolution: float):
    """Runs the engine's polygonizer. Raises DisposedTreeError if the tree is gone."""
    handle = tree.handle
    try:
        return tree.engine.render_mesh(handle, region, resolution)
    except KeyError:
        raise DisposedTreeError("Tree was disposed while it was being rendered.") from None

def render_mesh(tree: Tree, region, resolution: float = DEFAULT_RESOLUTION, splitting_angle: float = DEFAULT_SPLITTING_ANGLE, verbose: bool = False) -> Mesh:
    """
    Renders a tree to a triangle mesh on the calling thread.

    Args:
        tree (Tree): The shape to render. Must not be disposed.
        region (tuple): ((min_x, min_y, min_z), (max_x, max_y, max_z)). For
                        clean triangles it should be near-cubical.
        resolution (float): Roughly half the smallest feature size; cells
                            are subdivided until every side is below it.
        splitting_angle (float): Vertex splitting angle in degrees; 180
                                 keeps every vertex shared.
        verbose (bool): Print progress to stderr.
    """
    region = _normalize_region(region)
    start = time.time()
    if verbose: print(f"INFO: Rendering mesh... Region: {region}, resolution: {resolution}", file=sys.stderr)
    raw = _polygonize(tree, region, resolution)
    mesh = finalize_mesh(*(raw or (None, None)), splitting_angle=splitting_angle)
    if verbose: print(f"INFO: Rendered {len(mesh.triangles)} triangles in {time.time()-start:.2f}s.", file=sys.stderr)
    return mesh


class RenderJob:
    """
    A scheduled polygonization of one tree.

    The tree must not be disposed until the job completes; the job does not
    keep it alive. `complete()` blocks until the raw mesh is ready.
    """
    def __init__(self, tree: Tree, region, resolution: float, after: 'RenderJob' = None):
        self.tree = tree
        self.region = region
        self.resolution = resolution
        self.after = after
        self.future = None

    def _run(self):
        if self.after is not None:
            wait([self.after.future])
        return _polygonize(self.tree, self.region, self.resolution)

    def done(self) -> bool:
        return self.future is not None and self.future.done()

    def complete(self, splitting_angle: float = DEFAULT_SPLITTING_ANGLE) -> Mesh:
        """
        Waits for the job and returns its mesh.

        A disposed tree is a programming error and is re-raised. Any other
        polygonizer failure is reported and yields an empty mesh.
        """
        try:
            raw = self.future.result()
        except DisposedTreeError:
            raise
        except Exception as e:
            print(f"ERROR: Mesh rendering failed: {e}", file=sys.stderr)
            raw = None
        return finalize_mesh(*(raw or (None, None)), splitting_angle=splitting_angle)


class MeshRenderer:
    """
    Runs render jobs on a thread pool.

    Jobs chained with `after=` start only once the earlier job has finished;
    unchained jobs may run concurrently when `max_workers` > 1.
    """
    def __init__(self, max_workers: int = 1):
        self.executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix='frepforge-render')

    def schedule(self, tree: Tree, region, resolution: float = DEFAULT_RESOLUTION, after: RenderJob = None) -> RenderJob:
        if tree.disposed: raise DisposedTreeError("Cannot render a disposed tree.")
        if resolution <= 0: raise ValueError("Resolution must be positive.")
        job = RenderJob(tree, _normalize_region(region), resolution, after=after)
        job.future = self.executor.submit(job._run)
        return job

    def render(self, tree: Tree, region, resolution: float = DEFAULT_RESOLUTION, splitting_angle: float = DEFAULT_SPLITTING_ANGLE) -> Mesh:
        """Schedules a job and waits for it."""
        return self.schedule(tree, region, resolution).complete(splitting_angle)

    def shutdown(self, wait: bool = True):
        self.executor.shutdown(wait=wait)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.shutdown()
        return False
