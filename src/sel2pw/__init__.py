"""sel2pw - convert Selenium Java tests to Playwright TypeScript."""

__version__ = "0.1.0"
