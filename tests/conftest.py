"""Pytest fixtures for sel2pw tests."""

import tempfile
from pathlib import Path

import pytest

from sel2pw.analyzer import ProjectFile

LOGIN_TEST = """\
package com.example.tests;

import org.openqa.selenium.By;
import org.openqa.selenium.WebDriver;
import org.openqa.selenium.WebElement;
import org.openqa.selenium.chrome.ChromeDriver;
import org.testng.Assert;
import org.testng.annotations.AfterMethod;
import org.testng.annotations.BeforeMethod;
import org.testng.annotations.Test;

public class LoginTest {
    private WebDriver driver;

    @BeforeMethod
    public void setUp() {
        driver = new ChromeDriver();
        driver.get("https://example.com/login");
    }

    @Test
    public void testValidLogin() {
        driver.findElement(By.id("username")).sendKeys("admin");
        driver.findElement(By.id("password")).sendKeys("secret");
        driver.findElement(By.id("loginBtn")).click();
        String title = driver.getTitle();
        Assert.assertEquals(title, "Home");
    }

    @Test
    public void testErrorMessage() {
        WebElement error = driver.findElement(By.cssSelector(".error"));
        Assert.assertTrue(error.isDisplayed());
    }

    @AfterMethod
    public void tearDown() {
        driver.quit();
    }
}
"""

EMPTY_TEST = """\
package com.example.tests;

public class EmptyTest {
}
"""

LOGIN_PAGE = """\
package com.example.pages;

import org.openqa.selenium.By;
import org.openqa.selenium.WebDriver;
import org.openqa.selenium.WebElement;
import org.openqa.selenium.support.FindBy;
import org.openqa.selenium.support.PageFactory;

public class LoginPage {
    private WebDriver driver;

    @FindBy(id = "username")
    private WebElement usernameField;

    @FindBy(css = "button.submit")
    private WebElement submitButton;

    private By errorMessage = By.className("error");

    private WebElement rememberMe;

    public LoginPage(WebDriver driver) {
        this.driver = driver;
        PageFactory.initElements(driver, this);
    }

    public void login(String username, String password) {
        usernameField.sendKeys(username);
        submitButton.click();
    }

    public String getMessage() {
        return driver.findElement(By.id("message")).getText();
    }

    public boolean isRememberMeChecked() {
        return rememberMe.isSelected();
    }
}
"""

WAIT_UTILS = """\
package com.example.utils;

import org.openqa.selenium.WebDriver;

public class WaitUtils {
    public static void pause(long millis) throws InterruptedException {
        Thread.sleep(millis);
    }

    public static void openHome(WebDriver driver, String baseUrl) {
        driver.get(baseUrl);
    }
}
"""

LOGIN_FLOW_TEST = """\
package com.example.tests;

import com.example.pages.LoginPage;
import com.example.utils.WaitUtils;
import org.openqa.selenium.WebDriver;
import org.testng.Assert;
import org.testng.annotations.Test;

public class LoginFlowTest {
    private WebDriver driver;

    @Test
    public void testLogin() {
        driver.get("https://example.com");
        LoginPage loginPage = new LoginPage(driver);
        loginPage.login("admin", "secret");
        WaitUtils.pause(500);
        Assert.assertTrue(loginPage.isRememberMeChecked());
    }
}
"""

BUILD_GRADLE = """\
plugins {
    id 'java'
    id 'io.qameta.allure' version '2.11.2'
}

repositories {
    mavenCentral()
    maven { url 'https://repo.example.com/maven' }
}

dependencies {
    testImplementation 'org.seleniumhq.selenium:selenium-java:4.15.0'
    testImplementation "org.testng:testng:7.8.0"
    implementation group: 'io.github.bonigarcia', name: 'webdrivermanager', version: '5.6.2'
    testImplementation 'org.seleniumhq.selenium:selenium-java:4.15.0'
}

rootProject.name = 'shop-tests'
"""

CONFIG_PROPERTIES = "base.url=https://example.com\n"

PROJECT_FILES = {
    "build.gradle": BUILD_GRADLE,
    "src/test/java/com/example/tests/LoginFlowTest.java": LOGIN_FLOW_TEST,
    "src/test/java/com/example/pages/LoginPage.java": LOGIN_PAGE,
    "src/test/java/com/example/utils/WaitUtils.java": WAIT_UTILS,
    "src/test/resources/config.properties": CONFIG_PROPERTIES,
}


@pytest.fixture
def temp_dir():
    """Create a temporary directory."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def login_test_source():
    """A TestNG login test with setup, two tests and teardown."""
    return LOGIN_TEST


@pytest.fixture
def empty_test_source():
    """A class with a signature but no test methods."""
    return EMPTY_TEST


@pytest.fixture
def login_page_source():
    """A page object using @FindBy, By fields and an unresolved field."""
    return LOGIN_PAGE


@pytest.fixture
def build_gradle_source():
    return BUILD_GRADLE


@pytest.fixture
def project_files():
    """A small Selenium project: one test, one page object, one utility."""
    return [ProjectFile(path=path, content=content) for path, content in PROJECT_FILES.items()]


@pytest.fixture
def project_dir(temp_dir):
    """The sample project written to disk."""
    root = temp_dir / "project"
    for path, content in PROJECT_FILES.items():
        file_path = root / path
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_text(content)
    yield root
