import sys
from frepforge import Scope, sphere, box, difference, MeshRenderer, save_stl

def main():
    """
    Renders a coarse preview and a fine mesh of the same shape in the
    background. The fine job is chained after the preview, so the preview
    always finishes first.
    """
    region = ((-1.2, -1.2, -1.2), (1.2, 1.2, 1.2))
    with Scope(), MeshRenderer() as renderer:
        shape = difference(box((-0.8, -0.8, -0.8), (0.8, 0.8, 0.8)), sphere(1.0))
        preview = renderer.schedule(shape, region, resolution=0.2)
        fine = renderer.schedule(shape, region, resolution=0.03, after=preview)

        print(f"Preview: {len(preview.complete().triangles)} triangles")
        mesh = fine.complete(splitting_angle=30.0)
        print(f"Final: {len(mesh.triangles)} triangles")
        if not save_stl(mesh, "cube_minus_sphere.stl", name="cube_minus_sphere"):
            sys.exit(1)

if __name__ == "__main__":
    main()
