"""HSK curriculum: 50 practice levels grouped ten per HSK band.

Levels past the end of the table (reachable through XP alone) are treated as
the last curriculum level.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class LevelInfo:
    """One practice level of the curriculum."""

    level: int
    hsk_level: int
    topic: str
    emoji: str
    description: str
    vocabulary_focus: tuple[str, ...]
    grammar_focus: tuple[str, ...]
    estimated_words: int

    def to_dict(self) -> dict:
        return {
            "level": self.level,
            "hsk_level": self.hsk_level,
            "topic": self.topic,
            "emoji": self.emoji,
            "description": self.description,
            "vocabulary_focus": list(self.vocabulary_focus),
            "grammar_focus": list(self.grammar_focus),
            "estimated_words": self.estimated_words,
        }


LEVEL_STRUCTURE = (
    # HSK 1, levels 1-10
    LevelInfo(
        1, 1, "Greetings & Names", "👋",
        "Basic greetings, introductions, and asking names",
        vocabulary_focus=("你好", "谢谢", "再见", "我", "你", "他", "她", "叫", "什么", "名字"),
        grammar_focus=("Subject + 是 + Object", "你叫什么名字？"),
        estimated_words=15,
    ),
    LevelInfo(
        2, 1, "Numbers & Age", "🔢",
        "Numbers 1-10, asking and telling age",
        vocabulary_focus=("一", "二", "三", "四", "五", "六", "七", "八", "九", "十", "岁", "多大"),
        grammar_focus=("你多大？", "我...岁"),
        estimated_words=15,
    ),
    LevelInfo(
        3, 1, "Family Members", "👨‍👩‍👧‍👦",
        "Family relationships and describing family",
        vocabulary_focus=("爸爸", "妈妈", "哥哥", "姐姐", "弟弟", "妹妹", "儿子", "女儿", "家", "有"),
        grammar_focus=("我有...", "这是我的..."),
        estimated_words=15,
    ),
    LevelInfo(
        4, 1, "Days & Dates", "📅",
        "Days of the week, months, and dates",
        vocabulary_focus=("今天", "明天", "昨天", "星期", "月", "号", "年", "现在", "时候"),
        grammar_focus=("今天是星期几？", "几月几号？"),
        estimated_words=15,
    ),
    LevelInfo(
        5, 1, "Food & Drinks", "🍜",
        "Common foods, drinks, and ordering",
        vocabulary_focus=("吃", "喝", "米饭", "面条", "水", "茶", "咖啡", "菜", "水果", "喜欢"),
        grammar_focus=("我喜欢吃...", "你想喝什么？"),
        estimated_words=15,
    ),
    LevelInfo(
        6, 1, "Shopping & Money", "🛍️",
        "Basic shopping, prices, and money",
        vocabulary_focus=("买", "卖", "钱", "多少", "块", "元", "便宜", "贵", "东西", "商店"),
        grammar_focus=("多少钱？", "太贵了"),
        estimated_words=15,
    ),
    LevelInfo(
        7, 1, "Places & Directions", "🗺️",
        "Common places and basic directions",
        vocabulary_focus=("这里", "那里", "哪里", "学校", "家", "医院", "商店", "去", "来", "在"),
        grammar_focus=("在哪里？", "我去..."),
        estimated_words=15,
    ),
    LevelInfo(
        8, 1, "Time & Daily Activities", "⏰",
        "Telling time and daily routines",
        vocabulary_focus=("点", "分", "小时", "早上", "中午", "晚上", "睡觉", "起床", "工作", "休息"),
        grammar_focus=("几点了？", "我...点起床"),
        estimated_words=15,
    ),
    LevelInfo(
        9, 1, "Weather & Seasons", "☀️",
        "Weather conditions and seasons",
        vocabulary_focus=("天气", "热", "冷", "下雨", "下雪", "春天", "夏天", "秋天", "冬天", "很"),
        grammar_focus=("今天天气怎么样？", "很热/冷"),
        estimated_words=15,
    ),
    LevelInfo(
        10, 1, "Basic Emotions", "😊",
        "Expressing feelings and emotions",
        vocabulary_focus=("高兴", "开心", "难过", "生气", "累", "饿", "渴", "怎么样", "觉得", "很"),
        grammar_focus=("你怎么样？", "我很..."),
        estimated_words=15,
    ),
    # HSK 2, levels 11-20
    LevelInfo(
        11, 2, "Transportation", "🚗",
        "Modes of transport and travel",
        vocabulary_focus=("汽车", "火车", "飞机", "地铁", "公交车", "自行车", "走", "开", "坐", "快", "慢"),
        grammar_focus=("坐...去", "从...到..."),
        estimated_words=30,
    ),
    LevelInfo(
        12, 2, "Health & Body", "🏥",
        "Body parts, health, and illness",
        vocabulary_focus=("身体", "头", "眼睛", "耳朵", "手", "脚", "病", "药", "医生", "疼", "舒服"),
        grammar_focus=("...疼", "吃药"),
        estimated_words=30,
    ),
    LevelInfo(
        13, 2, "Hobbies & Sports", "⚽",
        "Sports, hobbies, and leisure activities",
        vocabulary_focus=("运动", "足球", "篮球", "游泳", "跑步", "唱歌", "跳舞", "看书", "电影", "音乐"),
        grammar_focus=("喜欢...ing", "会..."),
        estimated_words=30,
    ),
    LevelInfo(
        14, 2, "School & Study", "📚",
        "School subjects and studying",
        vocabulary_focus=("上课", "下课", "考试", "作业", "老师", "学生", "数学", "英语", "中文", "难", "容易"),
        grammar_focus=("在...ing", "...得怎么样？"),
        estimated_words=30,
    ),
    LevelInfo(
        15, 2, "Work & Office", "💼",
        "Work, jobs, and office life",
        vocabulary_focus=("工作", "公司", "办公室", "老板", "同事", "会议", "忙", "加班", "休息", "工资"),
        grammar_focus=("在...工作", "...得很晚"),
        estimated_words=30,
    ),
    LevelInfo(
        16, 2, "Colors & Clothing", "👕",
        "Colors, clothes, and appearance",
        vocabulary_focus=("红色", "蓝色", "白色", "黑色", "衣服", "裤子", "鞋子", "穿", "漂亮", "新", "旧"),
        grammar_focus=("穿着...", "...的"),
        estimated_words=30,
    ),
    LevelInfo(
        17, 2, "Housing & Rooms", "🏠",
        "Rooms, furniture, and home life",
        vocabulary_focus=("房间", "客厅", "卧室", "厨房", "洗手间", "桌子", "椅子", "床", "门", "窗户"),
        grammar_focus=("在...里", "...旁边"),
        estimated_words=30,
    ),
    LevelInfo(
        18, 2, "Technology & Phones", "📱",
        "Technology, phones, and internet",
        vocabulary_focus=("电话", "手机", "电脑", "网络", "发", "打电话", "短信", "邮件", "上网", "游戏"),
        grammar_focus=("给...打电话", "发...给..."),
        estimated_words=30,
    ),
    LevelInfo(
        19, 2, "Restaurants & Service", "🍽️",
        "Dining out and service",
        vocabulary_focus=("餐厅", "服务员", "菜单", "点菜", "好吃", "味道", "甜", "辣", "咸", "账单"),
        grammar_focus=("请给我...", "...怎么样？"),
        estimated_words=30,
    ),
    LevelInfo(
        20, 2, "Travel & Hotels", "✈️",
        "Travel, hotels, and tourism",
        vocabulary_focus=("旅游", "酒店", "房间", "预订", "护照", "行李", "机场", "火车站", "景点", "拍照"),
        grammar_focus=("去...旅游", "住在..."),
        estimated_words=30,
    ),
    # HSK 3, levels 21-30
    LevelInfo(
        21, 3, "Environment & Nature", "🌳",
        "Environment, nature, and ecology",
        vocabulary_focus=("环境", "空气", "污染", "干净", "树", "花", "草", "河", "山", "保护"),
        grammar_focus=("把...verb", "被..."),
        estimated_words=60,
    ),
    LevelInfo(
        22, 3, "Culture & Traditions", "🏮",
        "Chinese culture and traditions",
        vocabulary_focus=("文化", "传统", "节日", "春节", "中秋节", "习俗", "红包", "饺子", "历史", "古代"),
        grammar_focus=("不但...而且...", "虽然...但是..."),
        estimated_words=60,
    ),
    LevelInfo(
        23, 3, "Business & Economy", "📈",
        "Business, economy, and finance",
        vocabulary_focus=("生意", "市场", "价格", "质量", "客户", "合同", "投资", "利润", "竞争", "发展"),
        grammar_focus=("越来越...", "比较..."),
        estimated_words=60,
    ),
    LevelInfo(
        24, 3, "Relationships & Social", "💑",
        "Relationships and social interactions",
        vocabulary_focus=("朋友", "同学", "邻居", "关系", "结婚", "离婚", "约会", "聊天", "介绍", "认识"),
        grammar_focus=("跟...一起", "对...感兴趣"),
        estimated_words=60,
    ),
    LevelInfo(
        25, 3, "News & Media", "📰",
        "News, media, and current events",
        vocabulary_focus=("新闻", "报纸", "电视", "广播", "记者", "采访", "报道", "消息", "重要", "影响"),
        grammar_focus=("据说...", "听说..."),
        estimated_words=60,
    ),
    LevelInfo(
        26, 3, "Problems & Solutions", "💡",
        "Problem-solving and decision making",
        vocabulary_focus=("问题", "解决", "办法", "选择", "决定", "计划", "准备", "成功", "失败", "努力"),
        grammar_focus=("因为...所以...", "如果...就..."),
        estimated_words=60,
    ),
    LevelInfo(
        27, 3, "Art & Entertainment", "🎨",
        "Art, music, and entertainment",
        vocabulary_focus=("艺术", "画", "音乐会", "演出", "表演", "演员", "导演", "作品", "欣赏", "创作"),
        grammar_focus=("正在...呢", "一边...一边..."),
        estimated_words=60,
    ),
    LevelInfo(
        28, 3, "Science & Technology", "🔬",
        "Science, research, and innovation",
        vocabulary_focus=("科学", "研究", "实验", "发明", "技术", "数据", "分析", "结果", "理论", "发现"),
        grammar_focus=("通过...", "根据..."),
        estimated_words=60,
    ),
    LevelInfo(
        29, 3, "Law & Government", "⚖️",
        "Law, government, and society",
        vocabulary_focus=("法律", "政府", "规定", "权利", "责任", "公民", "社会", "安全", "警察", "法院"),
        grammar_focus=("必须...", "应该..."),
        estimated_words=60,
    ),
    LevelInfo(
        30, 3, "Personal Growth", "🌟",
        "Personal development and goals",
        vocabulary_focus=("目标", "梦想", "进步", "改变", "习惯", "经验", "能力", "信心", "坚持", "放弃"),
        grammar_focus=("为了...", "除了...以外"),
        estimated_words=60,
    ),
    # HSK 4, levels 31-40
    LevelInfo(
        31, 4, "Global Issues", "🌍",
        "Global challenges and international affairs",
        vocabulary_focus=("全球", "国际", "和平", "战争", "贫困", "难民", "合作", "援助", "危机", "解决方案"),
        grammar_focus=("不仅...而且...", "无论...都..."),
        estimated_words=120,
    ),
    LevelInfo(
        32, 4, "Psychology & Emotions", "🧠",
        "Psychology, emotions, and mental health",
        vocabulary_focus=("心理", "情绪", "压力", "焦虑", "抑郁", "治疗", "咨询", "理解", "同情", "支持"),
        grammar_focus=("既...又...", "一方面...另一方面..."),
        estimated_words=120,
    ),
    LevelInfo(
        33, 4, "Education System", "🎓",
        "Higher education and academic life",
        vocabulary_focus=("大学", "专业", "学位", "奖学金", "申请", "录取", "毕业", "论文", "导师", "研究生"),
        grammar_focus=("首先...然后...最后...", "不是...而是..."),
        estimated_words=120,
    ),
    LevelInfo(
        34, 4, "Career Development", "📊",
        "Career planning and professional growth",
        vocabulary_focus=("职业", "简历", "面试", "晋升", "培训", "技能", "经验", "目标", "发展", "机会"),
        grammar_focus=("尽管...还是...", "即使...也..."),
        estimated_words=120,
    ),
    LevelInfo(
        35, 4, "Social Media & Internet", "💻",
        "Digital life and online culture",
        vocabulary_focus=("社交媒体", "网站", "应用", "下载", "上传", "分享", "评论", "点赞", "粉丝", "网红"),
        grammar_focus=("随着...", "由于..."),
        estimated_words=120,
    ),
    LevelInfo(
        36, 4, "Literature & Writing", "📖",
        "Literature, writing, and storytelling",
        vocabulary_focus=("文学", "小说", "诗歌", "作者", "情节", "人物", "主题", "风格", "创作", "出版"),
        grammar_focus=("与其...不如...", "要么...要么..."),
        estimated_words=120,
    ),
    LevelInfo(
        37, 4, "Sports & Competition", "🏆",
        "Professional sports and competition",
        vocabulary_focus=("比赛", "冠军", "运动员", "教练", "训练", "成绩", "纪录", "奥运会", "团队", "策略"),
        grammar_focus=("只要...就...", "只有...才..."),
        estimated_words=120,
    ),
    LevelInfo(
        38, 4, "Philosophy & Ethics", "🤔",
        "Philosophy, ethics, and moral questions",
        vocabulary_focus=("哲学", "道德", "价值观", "原则", "真理", "正义", "自由", "责任", "选择", "意义"),
        grammar_focus=("假如...那么...", "既然...就..."),
        estimated_words=120,
    ),
    LevelInfo(
        39, 4, "Innovation & Future", "🚀",
        "Innovation, future trends, and technology",
        vocabulary_focus=("创新", "人工智能", "机器人", "自动化", "未来", "预测", "趋势", "变革", "突破", "可持续"),
        grammar_focus=("将要...", "即将..."),
        estimated_words=120,
    ),
    LevelInfo(
        40, 4, "Cross-Cultural Communication", "🤝",
        "Cultural exchange and communication",
        vocabulary_focus=("跨文化", "交流", "误解", "尊重", "差异", "共同点", "适应", "融入", "多样性", "包容"),
        grammar_focus=("相比之下...", "总的来说..."),
        estimated_words=120,
    ),
    # HSK 5, levels 41-50
    LevelInfo(
        41, 5, "Economic Development", "💹",
        "Economic theories and development",
        vocabulary_focus=("经济增长", "通货膨胀", "失业率", "供求关系", "市场经济", "宏观调控", "产业结构", "贸易顺差", "汇率", "金融危机"),
        grammar_focus=("鉴于...", "有鉴于此..."),
        estimated_words=250,
    ),
    LevelInfo(
        42, 5, "Medical Science", "⚕️",
        "Medical advances and healthcare",
        vocabulary_focus=("诊断", "症状", "治疗方案", "临床试验", "副作用", "免疫系统", "慢性病", "预防医学", "基因", "疫苗"),
        grammar_focus=("据统计...", "研究表明..."),
        estimated_words=250,
    ),
    LevelInfo(
        43, 5, "Legal System", "👨‍⚖️",
        "Legal system and justice",
        vocabulary_focus=("立法", "司法", "执法", "宪法", "民法", "刑法", "诉讼", "判决", "上诉", "辩护"),
        grammar_focus=("依法...", "根据法律规定..."),
        estimated_words=250,
    ),
    LevelInfo(
        44, 5, "Environmental Protection", "♻️",
        "Environmental protection and sustainability",
        vocabulary_focus=("可持续发展", "碳排放", "温室效应", "生态平衡", "资源枯竭", "循环经济", "清洁能源", "生物多样性", "垃圾分类", "环保意识"),
        grammar_focus=("为了保护...", "采取措施..."),
        estimated_words=250,
    ),
    LevelInfo(
        45, 5, "Social Issues", "👥",
        "Contemporary social issues",
        vocabulary_focus=("社会保障", "养老问题", "教育公平", "贫富差距", "性别平等", "就业歧视", "城乡差异", "人口老龄化", "社会矛盾", "公共服务"),
        grammar_focus=("面临...挑战", "引起...关注"),
        estimated_words=250,
    ),
    LevelInfo(
        46, 5, "Scientific Research", "🔭",
        "Scientific research and discoveries",
        vocabulary_focus=("假设", "论证", "数据分析", "实验设计", "对照组", "变量", "结论", "学术论文", "同行评审", "研究成果"),
        grammar_focus=("通过实验证明...", "基于...的研究"),
        estimated_words=250,
    ),
    LevelInfo(
        47, 5, "International Relations", "🌐",
        "Diplomacy and international relations",
        vocabulary_focus=("外交", "主权", "领土", "条约", "联合国", "多边合作", "双边关系", "国际组织", "制裁", "谈判"),
        grammar_focus=("在...框架下", "就...达成共识"),
        estimated_words=250,
    ),
    LevelInfo(
        48, 5, "Cultural Heritage", "🏛️",
        "Cultural heritage and preservation",
        vocabulary_focus=("文化遗产", "非物质文化", "考古", "文物", "保护修复", "世界遗产", "传承", "民间艺术", "传统工艺", "文化认同"),
        grammar_focus=("作为...的象征", "具有...价值"),
        estimated_words=250,
    ),
    LevelInfo(
        49, 5, "Modern Philosophy", "💭",
        "Modern philosophical thought",
        vocabulary_focus=("存在主义", "理性主义", "实用主义", "辩证法", "形而上学", "认识论", "伦理学", "美学", "逻辑思维", "批判性思考"),
        grammar_focus=("从...角度看", "在...意义上"),
        estimated_words=250,
    ),
    LevelInfo(
        50, 5, "Advanced Business", "🏢",
        "Advanced business and management",
        vocabulary_focus=("战略规划", "市场营销", "供应链", "风险管理", "并购", "股权", "董事会", "年度报告", "利益相关者", "企业文化"),
        grammar_focus=("致力于...", "旨在..."),
        estimated_words=250,
    ),
)

MAX_LEVEL = LEVEL_STRUCTURE[-1].level
MAX_HSK_LEVEL = LEVEL_STRUCTURE[-1].hsk_level

_BY_LEVEL = {info.level: info for info in LEVEL_STRUCTURE}

# Score on the 10-question quick check -> starting level
RECOMMENDED_LEVELS = (
    (3, 1),
    (5, 5),
    (7, 11),
    (8, 21),
    (9, 31),
)


def curriculum_level(level: int) -> int:
    """Clamp any user level onto the curriculum."""
    return max(1, min(level, MAX_LEVEL))


def get_level_info(level: int) -> LevelInfo | None:
    return _BY_LEVEL.get(level)


def get_levels_by_hsk(hsk_level: int) -> list[LevelInfo]:
    return [info for info in LEVEL_STRUCTURE if info.hsk_level == hsk_level]


def get_hsk_level(level: int) -> int:
    """HSK band of a level; levels past the table stay in the top band."""
    return _BY_LEVEL[curriculum_level(level)].hsk_level


def total_words_for_hsk(hsk_level: int) -> int:
    return sum(info.estimated_words for info in get_levels_by_hsk(hsk_level))


def get_recommended_level(score: int) -> int:
    """Starting level for a quick-check score out of 10."""
    for max_score, level in RECOMMENDED_LEVELS:
        if score <= max_score:
            return level
    return 41


def can_attempt_level(user_level: int, target_level: int) -> bool:
    """Users may practise within their HSK band or one band above."""
    return get_hsk_level(target_level) <= get_hsk_level(user_level) + 1
