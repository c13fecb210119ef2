"""Shared fixtures — a throwaway Craft project on disk."""

from pathlib import Path

import pytest

PROJECT_FILES: dict[str, str] = {
    "config/app.php": """<?php
/**
 * Yii Application Config
 */

use craft\\helpers\\App;
use modules\\blog\\Blog;

return [
    'id' => App::env('CRAFT_APP_ID') ?: 'CraftCMS',
    'modules' => [
        'blog' => Blog::class,
        'shop' => [
            'class' => 'modules\\\\shop\\\\Shop',
            'components' => [],
        ],
        'broken' => ['components' => []],
    ],
    'bootstrap' => ['blog'],
];
""",
    "vendor/composer/autoload_psr4.php": """<?php

// autoload_psr4.php @generated by Composer

$vendorDir = dirname(__DIR__);
$baseDir = dirname($vendorDir);

return array(
    'yii\\\\' => array($vendorDir . '/yiisoft/yii2'),
    'modules\\\\' => array($baseDir . '/modules'),
    'craft\\\\' => array($vendorDir . '/craftcms/cms/src'),
    'acme\\\\seo\\\\' => array($vendorDir . '/acme/seo/src'),
);
""",
    "vendor/craftcms/plugins.php": """<?php

$vendorDir = dirname(__DIR__);
$rootDir = dirname(dirname(__DIR__));

return array (
  'acme/craft-seo' =>
  array (
    'class' => 'acme\\\\seo\\\\Seo',
    'basePath' => $vendorDir . '/acme/seo/src',
    'handle' => 'seo',
    'aliases' =>
    array (
      '@acme/seo' => $vendorDir . '/acme/seo/src',
    ),
    'name' => 'SEO',
    'version' => '1.2.0',
  ),
);
""",
    "vendor/yiisoft/yii2/base/Controller.php": """<?php
namespace yii\\base;

class Controller extends Component
{
    public $id;
    public $defaultAction = 'index';

    public function actions()
    {
        return [];
    }

    public function runAction($id, $params = [])
    {
    }
}
""",
    "vendor/yiisoft/yii2/web/Controller.php": """<?php
namespace yii\\web;

class Controller extends \\yii\\base\\Controller
{
    public $enableCsrfValidation = true;

    public function asJson($data)
    {
    }
}
""",
    "vendor/craftcms/cms/src/web/Controller.php": """<?php
namespace craft\\web;

abstract class Controller extends \\yii\\web\\Controller
{
    protected array|bool|int $allowAnonymous = false;

    public function beforeAction($action): bool
    {
        return true;
    }
}
""",
    "vendor/craftcms/cms/src/controllers/EntriesController.php": """<?php
namespace craft\\controllers;

use craft\\web\\Controller;

class EntriesController extends Controller
{
    public function actionSaveEntry(): ?Response
    {
        return null;
    }

    protected function actionHidden()
    {
    }
}
""",
    "vendor/acme/seo/src/controllers/SitemapController.php": """<?php
namespace acme\\seo\\controllers;

use craft\\web\\Controller;

class SitemapController extends Controller
{
    public function actionGenerate()
    {
    }
}
""",
    "modules/blog/controllers/BaseController.php": """<?php
namespace modules\\blog\\controllers;

use craft\\web\\Controller;

abstract class BaseController extends Controller
{
    public function actionPing()
    {
    }
}
""",
    "modules/blog/controllers/PostsController.php": """<?php
namespace modules\\blog\\controllers;

class PostsController extends BaseController
{
    public function actionIndex()
    {
    }

    public function actionSave()
    {
    }
}
""",
    "modules/blog/controllers/ArchiveController.php": """<?php
namespace modules\\blog\\controllers;

use craft\\web\\Controller;

class ArchiveController extends Controller
{
    public $defaultAction = 'byYear';

    public function actionByYear()
    {
    }
}
""",
    "modules/blog/controllers/HelperController.php": """<?php
namespace modules\\blog\\controllers;

class HelperController
{
    public function actionNope()
    {
    }
}
""",
    "modules/blog/controllers/EmptyController.php": """<?php
namespace modules\\blog\\controllers;

use craft\\web\\Controller;

class EmptyController extends Controller
{
    public function actions()
    {
        return [];
    }
}
""",
    "modules/shop/controllers/CartController.php": """<?php
namespace modules\\shop\\controllers;

use craft\\web\\Controller;
use modules\\shop\\traits\\Checkout;

class CartController extends Controller
{
    use Checkout;

    public function actionAdd()
    {
    }
}
""",
    "modules/shop/traits/Checkout.php": """<?php
namespace modules\\shop\\traits;

trait Checkout
{
    public function actionCheckout()
    {
    }
}
""",
    "templates/index.twig": """{% extends "_layout" %}
<form method="post">
    {{ actionInput('blog/posts/save') }}
</form>
""",
    "templates/shop/cart.twig": """<form method="post">
  {{ csrfInput() }}
  {{ actionInput("shop/cart/add") }}
</form>
<form method="post">
  {{ actionInput('shop/cart/remove') }}
</form>
""",
}


def write_files(root: Path, files: dict[str, str]) -> Path:
    """Write ``relative path -> content`` into ``root``."""
    for relative, content in files.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    return root


@pytest.fixture
def craft_project(tmp_path: Path) -> Path:
    """A Craft project with core, module and plugin controllers."""
    return write_files(tmp_path, PROJECT_FILES)


@pytest.fixture
def make_files(tmp_path: Path):
    """Write a ``relative path -> content`` dict under ``tmp_path``."""

    def _make(files: dict[str, str]) -> Path:
        return write_files(tmp_path, files)

    return _make
