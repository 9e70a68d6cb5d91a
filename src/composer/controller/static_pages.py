"""Fixed pages served for unknown routes and server errors.

The bodies never contain request or exception details.
"""

NOT_FOUND_PAGE = """<!DOCTYPE html>
<html lang="en">
  <head>
    <meta charset="utf-8">
    <title>Page not found</title>
  </head>
  <body>
    <main>
      <h1>404</h1>
      <p>Sorry, the page you are looking for does not exist.</p>
    </main>
  </body>
</html>
"""

SERVER_ERROR_PAGE = """<!DOCTYPE html>
<html lang="en">
  <head>
    <meta charset="utf-8">
    <title>Something went wrong</title>
  </head>
  <body>
    <main>
      <h1>500</h1>
      <p>Sorry, something went wrong on our side. Please try again later.</p>
    </main>
  </body>
</html>
"""


def not_found_page() -> str:
    return NOT_FOUND_PAGE


def server_error_page() -> str:
    return SERVER_ERROR_PAGE
