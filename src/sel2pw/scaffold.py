"""Fixed Playwright project files emitted with every batch conversion."""

from .models import GeneratedFile

PLAYWRIGHT_CONFIG = """\
import { defineConfig, devices } from '@playwright/test';

/**
 * See https://playwright.dev/docs/test-configuration.
 */
export default defineConfig({
  testDir: './src',
  /* Maximum time one test can run for. */
  timeout: 30 * 1000,
  expect: {
    /**
     * Maximum time expect() should wait for the condition to be met.
     * For example in `await expect(locator).toHaveText();`
     */
    timeout: 5000
  },
  /* Run tests in files in parallel */
  fullyParallel: true,
  /* Fail the build on CI if you accidentally left test.only in the source code. */
  forbidOnly: !!process.env.CI,
  /* Retry on CI only */
  retries: process.env.CI ? 2 : 0,
  /* Opt out of parallel tests on CI. */
  workers: process.env.CI ? 1 : undefined,
  /* Reporter to use. See https://playwright.dev/docs/test-reporters */
  reporter: 'html',
  /* Shared settings for all the projects below. See https://playwright.dev/docs/api/class-testoptions. */
  use: {
    /* Maximum time each action such as `click()` can take. Defaults to 0 (no limit). */
    actionTimeout: 0,
    /* Base URL to use in actions like `await page.goto('/')`. */
    // baseURL: 'http://localhost:3000',

    /* Collect trace when retrying the failed test. See https://playwright.dev/docs/trace-viewer */
    trace: 'on-first-retry',
  },

  /* Configure projects for major browsers */
  projects: [
    {
      name: 'chromium',
      use: { ...devices['Desktop Chrome'] },
    },

    {
      name: 'firefox',
      use: { ...devices['Desktop Firefox'] },
    },

    {
      name: 'webkit',
      use: { ...devices['Desktop Safari'] },
    },
  ],
});
"""

PACKAGE_JSON = """\
{
  "name": "playwright-tests",
  "version": "1.0.0",
  "description": "Playwright tests converted from Selenium",
  "main": "index.js",
  "scripts": {
    "test": "playwright test",
    "test:headed": "playwright test --headed",
    "test:ui": "playwright test --ui",
    "report": "playwright show-report"
  },
  "keywords": [
    "playwright",
    "testing",
    "automation"
  ],
  "author": "",
  "license": "ISC",
  "devDependencies": {
    "@playwright/test": "^1.40.0",
    "@types/node": "^20.10.0",
    "typescript": "^5.3.2"
  }
}
"""

TSCONFIG_JSON = """\
{
  "compilerOptions": {
    "target": "ES2022",
    "module": "commonjs",
    "moduleResolution": "node",
    "sourceMap": true,
    "outDir": "./dist",
    "esModuleInterop": true,
    "forceConsistentCasingInFileNames": true,
    "strict": true,
    "skipLibCheck": true,
    "resolveJsonModule": true
  },
  "include": ["src/**/*", "playwright.config.ts"]
}
"""

README_MD = """\
# Playwright Test Suite

This project was automatically converted from a Selenium Java test suite to Playwright TypeScript.

## Project Structure

- `src/` - Test specs, page objects and utilities
- `playwright.config.ts` - Playwright configuration
- `package.json` - Project dependencies and scripts

## Getting Started

1. Install dependencies:
   ```
   npm install
   ```

2. Install Playwright browsers:
   ```
   npx playwright install
   ```

3. Run the tests:
   ```
   npm test
   ```

## Running Tests with UI

```
npm run test:ui
```

## Running Tests in Headed Mode

```
npm run test:headed
```

## Viewing Test Report

```
npm run report
```

## Notes on Conversion

Lines marked `// TODO: Convert ... manually` could not be translated
automatically and need a manual rewrite.
"""

CONFIG_TEMPLATES = (
    ("playwright.config.ts", PLAYWRIGHT_CONFIG),
    ("package.json", PACKAGE_JSON),
    ("tsconfig.json", TSCONFIG_JSON),
    ("README.md", README_MD),
)


def config_files() -> list[GeneratedFile]:
    """Return the project files, always in the same order and with the same content."""
    return [GeneratedFile(file_path=path, content=content) for path, content in CONFIG_TEMPLATES]
