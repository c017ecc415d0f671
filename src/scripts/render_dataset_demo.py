import sys
from pathlib import Path

from geolens import CachingReader, MapRenderer, ShapefileSource, StyleSpec, open_source, render_svg


def main():
    if len(sys.argv) < 2:
        print("uso: python render_dataset_demo.py <diretório do shapefile | arquivo/URL GeoJSON> [template]")
        sys.exit(2)

    location = sys.argv[1]
    template = sys.argv[2] if len(sys.argv) > 2 else None

    out_root = Path("geolens_tmp")
    out_root.mkdir(exist_ok=True)

    print("Origem:", location)
    print("Saída:", out_root.resolve())

    # ------------------------------------------------------------
    # 1. Leitura (com cache, para não baixar a mesma URL duas vezes)
    # ------------------------------------------------------------
    source = open_source(location)
    reader = CachingReader()
    collection = reader.read(location)
    reader.read(location)

    print(f"\n▶ {len(collection)} features ({collection.source_format}, {collection.crs})")
    print("  bbox:", collection.bounding_box.as_tuple() if collection.bounding_box else "-")
    print("  atributos:", ", ".join(collection.property_keys()))

    # ------------------------------------------------------------
    # 2. Arquivos auxiliares (apenas shapefiles)
    # ------------------------------------------------------------
    if isinstance(source, ShapefileSource):
        print("\n▶ Arquivos auxiliares:")
        for name, content in source.ancillary().items():
            print(f" - {name}: {type(content).__name__}")

    # ------------------------------------------------------------
    # 3. Renderização
    # ------------------------------------------------------------
    style = StyleSpec(
        label_template=template,
        fill_opacity=0.6,
        stroke_weight=1.9,
        scroll_locked=True,
    )
    view = MapRenderer().render(collection, style)

    (out_root / "view.json").write_text(view.to_json(indent=2), encoding="utf-8")
    (out_root / "preview.svg").write_text(render_svg(view), encoding="utf-8")

    print("\n▶ Viewport:", view.viewport.center, "zoom", view.viewport.zoom)
    for p in (out_root / "view.json", out_root / "preview.svg"):
        status = "OK" if p.exists() else "❌ NÃO EXISTE"
        print(f" - {p.name}: {status}")

    print("\n✅ Demo finalizada.")


if __name__ == "__main__":
    main()
