"""Contentful Entry Translator — string export / translation import tool.

Launch with: python main.py --help
"""

from cms_translator.cli import app


def main():
    app()


if __name__ == "__main__":
    main()
