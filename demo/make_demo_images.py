from pathlib import Path
from PIL import Image

def write_jpg(path: Path, size=(400, 300)):
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.new("RGB", size).save(path)

def main():
    base = Path(__file__).parent / "images"

    # breakpoints + hidpi
    write_jpg(base/"hero.jpg", (400, 300))
    write_jpg(base/"hero.2x.jpg", (800, 600))
    write_jpg(base/"hero.medium.jpg", (768, 450))
    write_jpg(base/"hero.medium.2x.jpg", (1536, 900))
    write_jpg(base/"hero.large.jpg", (1024, 600))

    # class variant (register "variant" to pick it up)
    write_jpg(base/"kitten.jpg", (300, 286))
    write_jpg(base/"kitten.variant.jpg", (300, 386))

    # unknown extension (skipped with a warning)
    write_jpg(base/"hero.foo.jpg")

if __name__ == "__main__":
    main()
