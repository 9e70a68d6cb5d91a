"""Application-wide constants."""

DEFAULT_REGION = "eu-west-1"
DEFAULT_PORT = 3000

# Parameter Store names published by the deployment stack
DEFAULT_TEMPLATE_BUCKET_PARAMETER = "/ssr-mfe/templatesBucket"
DEFAULT_TEMPLATE_KEY_PARAMETER = "/ssr-mfe/catalogTemplate"
DEFAULT_MFE_LIST_PARAMETER = "/ssr-mfe/microFrontends"
DEFAULT_DOWNSTREAM_PARAMETERS = {
    "catalog": "/ssr-mfe/catalogArn",
    "reviews": "/ssr-mfe/reviewsArn",
}

# SSM GetParameters accepts at most 10 names per call
SSM_GET_PARAMETERS_BATCH_SIZE = 10

HTML_MEDIA_TYPE = "text/html"
HELLO_MESSAGE = "Welcome to the Micro-Frontends in AWS example"
