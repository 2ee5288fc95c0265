"""
DXF loading for the print post-processor.

Reads a DXF file with ezdxf and decodes its modelspace into Entity objects,
in drawing order.
"""

from typing import List

import ezdxf
from ezdxf.math import Vec3

from dxf_print_postprocessor import Entity, EntityKind
from print_geometry import Point


def read_entities(filename: str) -> List[Entity]:
    """
    Load a DXF file and decode its modelspace.

    Raises:
        IOError: file missing or not readable
        ezdxf.DXFStructureError: file is not a valid DXF document
    """
    print(f"Loading {filename}...")
    doc = ezdxf.readfile(filename)
    return entities_from_document(doc)


def entities_from_document(doc) -> List[Entity]:
    """Decode every modelspace entity of an ezdxf document"""
    return [decode_entity(entity) for entity in doc.modelspace()]


def decode_entity(entity) -> Entity:
    dxftype = entity.dxftype()

    if dxftype == 'POLYLINE':
        # Polyface meshes and polygon meshes are also POLYLINEs - not paths
        if entity.is_2d_polyline or entity.is_3d_polyline:
            # 2D polylines sit at the entity elevation, like LWPOLYLINE
            z_offset = 0.0
            if entity.is_2d_polyline:
                z_offset = Vec3(entity.dxf.get('elevation', (0, 0, 0))).z
            vertices = [Point(v.dxf.location.x, v.dxf.location.y, v.dxf.location.z + z_offset)
                        for v in entity.vertices]
            return Entity(EntityKind.POLYLINE, vertices, dxftype)
        return Entity(EntityKind.OTHER, dxftype=dxftype)

    if dxftype == 'LWPOLYLINE':
        # LWPOLYLINE vertices are 2D; the whole entity sits at one elevation
        z = float(entity.dxf.get('elevation', 0.0))
        vertices = [Point(float(x), float(y), z) for x, y in entity.get_points('xy')]
        return Entity(EntityKind.POLYLINE, vertices, dxftype)

    if dxftype == 'SPLINE':
        return Entity(EntityKind.SPLINE, dxftype=dxftype)

    return Entity(EntityKind.OTHER, dxftype=dxftype)
