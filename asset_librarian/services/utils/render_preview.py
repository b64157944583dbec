"""
FBX Preview Render Script

This script runs INSIDE Blender via --python flag.
It imports one FBX into an empty scene, frames it and renders a
single square PNG preview.

Usage:
    blender --background --factory-startup --python render_preview.py -- <model_path> <output_png> [size]

Scene setup:
    - model centered, uniformly scaled into a 2-unit box, resting on the ground
    - every mesh gets the same neutral grey material (embedded materials
      on raw imports are often missing or broken)
    - ambient world light plus key, fill and back sun lights
    - fixed camera at (2, -2, 1.5) looking at (0, 0, 0.5)
"""

import bpy
import math
import sys
from mathutils import Matrix, Vector

BACKGROUND_COLOR = (0.0232, 0.0262, 0.0343, 1.0)  # #2a2d34 in linear space
MATERIAL_COLOR = (0.246, 0.246, 0.246, 1.0)  # #888888 in linear space

# (location, energy) - Blender is Z-up
SUN_LIGHTS = [
    ((5.0, -7.0, 10.0), 3.0),   # key
    ((-5.0, 5.0, 5.0), 1.5),    # fill
    ((0.0, 10.0, 5.0), 0.75),   # back
]
CAMERA_LOCATION = Vector((2.0, -2.0, 1.5))
CAMERA_TARGET = Vector((0.0, 0.0, 0.5))
CAMERA_FOV_DEGREES = 45.0
TARGET_SIZE = 2.0


def reset_scene():
    """Start from an empty scene"""
    bpy.ops.wm.read_factory_settings(use_empty=True)
    return bpy.context.scene


def world_bounds(objects):
    """World-space bounding box of a set of mesh objects"""
    corners = [obj.matrix_world @ Vector(corner) for obj in objects for corner in obj.bound_box]
    minimum = Vector((min(c.x for c in corners), min(c.y for c in corners), min(c.z for c in corners)))
    maximum = Vector((max(c.x for c in corners), max(c.y for c in corners), max(c.z for c in corners)))
    return minimum, maximum


def frame_model(scene, meshes):
    """Center, scale to TARGET_SIZE and rest the model on z=0"""
    minimum, maximum = world_bounds(meshes)
    center = (minimum + maximum) / 2.0
    size = maximum - minimum
    max_dim = max(size.x, size.y, size.z)
    scale = TARGET_SIZE / max_dim if max_dim > 0 else 1.0

    transform = Matrix.Scale(scale, 4) @ Matrix.Translation(-center)
    roots = [obj for obj in scene.objects if obj.parent is None]
    for obj in roots:
        obj.matrix_world = transform @ obj.matrix_world

    bpy.context.view_layer.update()
    minimum, _ = world_bounds(meshes)
    lift = Matrix.Translation(Vector((0.0, 0.0, -minimum.z)))
    for obj in roots:
        obj.matrix_world = lift @ obj.matrix_world
    bpy.context.view_layer.update()


def apply_neutral_material(meshes):
    """Replace every material with one grey principled material"""
    material = bpy.data.materials.new("PreviewMaterial")
    material.use_nodes = True
    bsdf = material.node_tree.nodes.get("Principled BSDF")
    if bsdf:
        bsdf.inputs["Base Color"].default_value = MATERIAL_COLOR
        bsdf.inputs["Roughness"].default_value = 0.5
        bsdf.inputs["Metallic"].default_value = 0.1

    for obj in meshes:
        obj.data.materials.clear()
        obj.data.materials.append(material)


def setup_world(scene):
    """Ambient white light; the camera sees the dark background colour"""
    world = bpy.data.worlds.new("PreviewWorld")
    world.use_nodes = True
    nodes = world.node_tree.nodes
    links = world.node_tree.links
    nodes.clear()

    ambient = nodes.new("ShaderNodeBackground")
    ambient.inputs["Color"].default_value = (1.0, 1.0, 1.0, 1.0)
    ambient.inputs["Strength"].default_value = 0.6

    backdrop = nodes.new("ShaderNodeBackground")
    backdrop.inputs["Color"].default_value = BACKGROUND_COLOR
    backdrop.inputs["Strength"].default_value = 1.0

    light_path = nodes.new("ShaderNodeLightPath")
    mix = nodes.new("ShaderNodeMixShader")
    output = nodes.new("ShaderNodeOutputWorld")

    links.new(light_path.outputs["Is Camera Ray"], mix.inputs["Fac"])
    links.new(ambient.outputs["Background"], mix.inputs[1])
    links.new(backdrop.outputs["Background"], mix.inputs[2])
    links.new(mix.outputs["Shader"], output.inputs["Surface"])

    scene.world = world


def add_lights(scene):
    """Three directional lights aimed at the origin"""
    for index, (location, energy) in enumerate(SUN_LIGHTS):
        light = bpy.data.lights.new(f"PreviewSun{index}", type='SUN')
        light.energy = energy
        obj = bpy.data.objects.new(f"PreviewSun{index}", light)
        obj.location = location
        obj.rotation_euler = (-Vector(location)).to_track_quat('-Z', 'Y').to_euler()
        scene.collection.objects.link(obj)


def add_camera(scene):
    """Fixed camera pose"""
    camera_data = bpy.data.cameras.new("PreviewCamera")
    camera_data.angle = math.radians(CAMERA_FOV_DEGREES)
    camera = bpy.data.objects.new("PreviewCamera", camera_data)
    camera.location = CAMERA_LOCATION
    camera.rotation_euler = (CAMERA_TARGET - CAMERA_LOCATION).to_track_quat('-Z', 'Y').to_euler()
    scene.collection.objects.link(camera)
    scene.camera = camera


def pick_render_engine():
    """EEVEE where available, Cycles otherwise"""
    items = bpy.types.RenderSettings.bl_rna.properties['engine'].enum_items
    available = {item.identifier for item in items}
    for engine in ('BLENDER_EEVEE_NEXT', 'BLENDER_EEVEE', 'CYCLES'):
        if engine in available:
            return engine
    return 'BLENDER_WORKBENCH'


def render_preview(model_path, output_path, size=512):
    """
    Render one preview frame of an FBX file.

    Args:
        model_path: FBX file to import
        output_path: PNG file to write
        size: Square resolution in pixels

    Returns:
        True if successful, False otherwise
    """
    print(f"Rendering preview for: {model_path}")

    try:
        scene = reset_scene()
        bpy.ops.import_scene.fbx(filepath=model_path)

        meshes = [obj for obj in scene.objects if obj.type == 'MESH']
        if not meshes:
            print(f"Error: No mesh objects in {model_path}")
            return False

        frame_model(scene, meshes)
        apply_neutral_material(meshes)
        setup_world(scene)
        add_lights(scene)
        add_camera(scene)

        scene.render.engine = pick_render_engine()
        scene.render.resolution_x = size
        scene.render.resolution_y = size
        scene.render.resolution_percentage = 100
        scene.render.image_settings.file_format = 'PNG'
        scene.render.filepath = output_path
        scene.view_settings.view_transform = 'Standard'

        bpy.ops.render.render(write_still=True)
        print(f"Preview written to: {output_path}")
        return True

    except Exception as e:
        print(f"Error during preview render: {str(e)}")
        import traceback
        traceback.print_exc()
        return False


if __name__ == "__main__":
    # Get arguments after "--"
    try:
        args_idx = sys.argv.index("--")
        args = sys.argv[args_idx + 1:]
    except ValueError:
        print("Error: Arguments not found. Use '--' to separate arguments.")
        print("Usage: blender --background --python render_preview.py -- <model_path> <output_png> [size]")
        sys.exit(1)

    if len(args) < 2:
        print("Error: Model path and output path are required")
        print("Usage: blender --background --python render_preview.py -- <model_path> <output_png> [size]")
        sys.exit(1)

    size = int(args[2]) if len(args) > 2 else 512

    if not render_preview(args[0], args[1], size):
        sys.exit(1)
