from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

from support import write

from actionflow.app_constants import MAVEN_MODEL
from actionflow.populators import (
    MavenModelPopulator,
    SystemModelPopulator,
    dependency_artifact_ids,
    populate_model,
)

POM = """<?xml version="1.0" encoding="UTF-8"?>
<project xmlns="http://maven.apache.org/POM/4.0.0">
  <modelVersion>4.0.0</modelVersion>
  <parent>
    <groupId>org.springframework.boot</groupId>
    <artifactId>spring-boot-starter-parent</artifactId>
    <version>3.1.0</version>
  </parent>
  <groupId>com.example</groupId>
  <artifactId>rest-service</artifactId>
  <version>0.0.1-SNAPSHOT</version>
  <name>rest-service</name>
  <dependencies>
    <dependency>
      <groupId>org.springframework.boot</groupId>
      <artifactId>spring-boot-starter-web</artifactId>
    </dependency>
    <dependency>
      <groupId>org.springframework.boot</groupId>
      <artifactId>spring-boot-starter-test</artifactId>
      <scope>test</scope>
    </dependency>
  </dependencies>
</project>
"""


class PopulatorTests(unittest.TestCase):
    def test_maven_model_from_pom(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            cwd = Path(tmp)
            write(cwd / "pom.xml", POM)
            model: dict = {"artifact-id": "from-option"}
            populate_model(model, cwd, [MavenModelPopulator()])
            maven_model = model[MAVEN_MODEL]
            self.assertEqual(maven_model["group-id"], "com.example")
            self.assertEqual(maven_model["version"], "0.0.1-SNAPSHOT")
            self.assertEqual(maven_model["dependencies"][1]["scope"], "test")
            self.assertEqual(model["artifact-id"], "from-option")
            self.assertEqual(model["group-id"], "com.example")
            self.assertEqual(model["root-package"], "com.example.restservice")
            self.assertEqual(
                dependency_artifact_ids(model),
                {"spring-boot-starter-web", "spring-boot-starter-test"},
            )

    def test_no_pom_means_no_dependency_facts(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            model: dict = {}
            populate_model(model, Path(tmp), [MavenModelPopulator()])
            self.assertEqual(model, {})
            self.assertIsNone(dependency_artifact_ids(model))

    def test_malformed_pom_contributes_nothing(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            cwd = Path(tmp)
            write(cwd / "pom.xml", "<project><artifactId>")
            with self.assertLogs("actionflow.populators", level="WARNING"):
                additions = MavenModelPopulator().contribute_to_model(cwd)
            self.assertEqual(additions, {})

    def test_system_populator_does_not_overwrite(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            model: dict = {"os-name": "custom"}
            populate_model(model, Path(tmp), [SystemModelPopulator()])
            self.assertEqual(model["os-name"], "custom")
            self.assertEqual(model["working-directory"], str(Path(tmp)))
            self.assertIn("user-name", model)


if __name__ == "__main__":
    unittest.main()
