import logging

from demo.app import DemoApp
from scrollsnap.settings import load_settings

def main():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    app = DemoApp(load_settings())
    app.run()

if __name__ == "__main__":
    main()
