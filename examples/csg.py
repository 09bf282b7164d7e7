import sys
from frepforge import (
    Scope, sphere, box, cylinder, union, intersection, difference, blend,
    reflect_xz, reflect_yz, move, render_mesh, save_stl
)

REGION = ((-1.55, -1.55, -1.55), (1.55, 1.55, 1.55))

def union_example(): return union(sphere(0.8), box((-0.75, -0.25, -0.25), (0.75, 0.25, 0.25)))
def intersection_example(): return intersection(sphere(1.0, (-0.5, 0, 0)), sphere(1.0, (0.5, 0, 0)))
def difference_example(): return difference(box((-0.75, -0.75, -0.75), (0.75, 0.75, 0.75)), sphere(1.0))

def blend_example():
    return blend(sphere(0.7, (-0.5, 0, 0)), sphere(0.7, (0.5, 0, 0)), amount=0.6)

def drilled_sphere_example(inner_radius: float = 0.6):
    """A sphere with three perpendicular cylindrical holes through it."""
    hole = cylinder(inner_radius, 2.0, (0, 0, -1))
    return difference(sphere(1.0), hole, reflect_xz(hole), reflect_yz(hole))

def moved_box_example():
    return move(box((-0.5, -0.5, -0.5), (0.5, 0.5, 0.5)), (0.5, 0.5, 0))

def main():
    print("--- frepforge CSG Examples ---")
    examples = {
        "union": union_example, "intersection": intersection_example, "difference": difference_example,
        "blend": blend_example, "drilled_sphere": drilled_sphere_example, "moved_box": moved_box_example,
    }

    if len(sys.argv) < 2:
        print("Available examples:", ", ".join(examples.keys()))
        return

    func = examples.get(sys.argv[1])
    if func:
        with Scope():
            mesh = render_mesh(func(), REGION, resolution=0.05, splitting_angle=25.0, verbose=True)
            save_stl(mesh, f"{sys.argv[1]}.stl", name=sys.argv[1])
    else: print(f"Example '{sys.argv[1]}' not found.")

if __name__ == "__main__":
    main()
