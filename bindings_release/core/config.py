from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    app_name: str = "bindings-release"
    api_host: str = "0.0.0.0"
    api_port: int = 8080

    redis_url: str = "redis://localhost:6379/0"

    workspaces_dir: str = "/data/workspaces"

    # Source tree holding the binding generator. When source_repo_url is set,
    # it is cloned into the run workspace at source_ref, or at the release tag
    # when source_ref is unset.
    source_dir: str = "."
    source_repo_url: str | None = None
    source_ref: str | None = None

    target_repo_url: str = "https://github.com/zkonduit/ezkl-swift-package.git"
    target_branch: str | None = None

    build_command: list[str] = ["cargo", "run", "--bin", "ios_gen_bindings"]
    build_features: list[str] = ["ios-bindings", "uuid", "camino", "uniffi_bindgen"]
    build_default_features: bool = False
    build_configuration: str = "release"
    build_output_dir: str = "build/EzklCoreBindings"
    artifact_dest: str = "Sources/EzklCoreBindings"

    test_runner: list[str] = ["xcodebuild", "test"]
    test_destination: str = "platform=iOS Simulator,name=iPhone 15 Pro,OS=17.5"
    library_suite_scheme: str = "EzklPackage"
    library_suite_skip: list[str] = []
    integration_suite_dir: str = "Example"
    integration_suite_project: str = "Example.xcodeproj"
    integration_suite_scheme: str = "EzklApp"
    integration_suite_skip: list[str] = [
        "EzklAppUITests/EzklAppUITests/testButtonClicksInOrder",
    ]

    git_author_name: str = "GitHub Action"
    git_author_email: str = "action@github.com"
    commit_message: str = "Automatically updated EzklCoreBindings for EZKL"

    credential_env_var: str = "EZKL_PORTER_TOKEN"
    credential_username: str = "zkonduit"

    # Upper bound for toolchain and test-runner subprocesses; None waits forever.
    stage_timeout_s: float | None = None

settings = Settings()
