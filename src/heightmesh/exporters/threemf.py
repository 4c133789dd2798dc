"""3MF export using custom XML + ZIP."""

import zipfile

from ..core.models import Solid
from .atomic import atomic_output


def _escape(text: str) -> str:
    return (
        text.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
    )


def write_3mf(solid: Solid, output_path: str) -> dict:
    """Write a validated solid as a single-object 3MF package.

    Triangle corners are merged into shared vertices, which 3MF requires
    for a manifold object. The ZIP archive contains:
    - [Content_Types].xml
    - _rels/.rels
    - 3D/3dmodel.model (the actual model XML)
    """
    vertices, faces = solid.indexed()
    model_xml = _build_model_xml(solid.name, vertices, faces)

    with atomic_output(output_path) as fh:
        with zipfile.ZipFile(fh, "w", zipfile.ZIP_DEFLATED) as zf:
            zf.writestr("[Content_Types].xml", _CONTENT_TYPES)
            zf.writestr("_rels/.rels", _RELS)
            zf.writestr("3D/3dmodel.model", model_xml)

    return {
        "success": True,
        "filepath": output_path,
        "vertices": len(vertices),
        "triangles": len(faces),
    }


def _build_model_xml(name, vertices, faces) -> str:
    parts = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        '<model unit="millimeter" xml:lang="en-US"',
        '  xmlns="http://schemas.microsoft.com/3dmanufacturing/core/2015/02">',
        '  <metadata name="Application">heightmesh</metadata>',
        "  <resources>",
        f'    <object id="1" name="{_escape(name)}" type="model">',
        "      <mesh>",
        "        <vertices>",
    ]
    for v in vertices:
        parts.append(f'          <vertex x="{v[0]:.6f}" y="{v[1]:.6f}" z="{v[2]:.6f}"/>')
    parts.append("        </vertices>")

    parts.append("        <triangles>")
    for f in faces:
        parts.append(f'          <triangle v1="{f[0]}" v2="{f[1]}" v3="{f[2]}"/>')
    parts.append("        </triangles>")

    parts.extend([
        "      </mesh>",
        "    </object>",
        "  </resources>",
        "  <build>",
        '    <item objectid="1"/>',
        "  </build>",
        "</model>",
    ])
    return "\n".join(parts)


_CONTENT_TYPES = """<?xml version="1.0" encoding="UTF-8"?>
<Types xmlns="http://schemas.openxmlformats.org/package/2006/content-types">
  <Default Extension="rels" ContentType="application/vnd.openxmlformats-package.relationships+xml"/>
  <Default Extension="model" ContentType="application/vnd.ms-package.3dmanufacturing-3dmodel+xml"/>
</Types>"""

_RELS = """<?xml version="1.0" encoding="UTF-8"?>
<Relationships xmlns="http://schemas.openxmlformats.org/package/2006/relationships">
  <Relationship Target="/3D/3dmodel.model" Id="rel0" Type="http://schemas.microsoft.com/3dmanufacturing/2013/01/3dmodel"/>
</Relationships>"""
