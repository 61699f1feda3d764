"""Example suites for a small user-management API."""

from ricochet import ConfigLoader, RequestContext, SuiteRegistry


def health(r: RequestContext) -> None:
    r.expect_status(r.get("/health"), 200)


def list_users(r: RequestContext) -> None:
    users = r.expect_json(r.expect_status(r.get("/api/v1/users"), 200))
    if not isinstance(users, list):
        r.fail(f"expected a list of users, got {type(users).__name__}")


def create_user(r: RequestContext) -> None:
    response = r.post("/api/v1/users", json={"username": "ricochet_user"})
    r.expect_status(response, 201)


def register_suites(registry: SuiteRegistry, config: ConfigLoader) -> None:
    registry.register("health").add_test("service is up", health)

    # An unreachable token endpoint leaves "users" unauthenticated; the
    # runner sees suite.bootstrap_error and exits with EXIT_UNREACHABLE.
    users = registry.register("users").authenticate(**config.auth_settings())
    if users is None:
        return

    users.add_test("list users", list_users).add_test("create user", create_user)
